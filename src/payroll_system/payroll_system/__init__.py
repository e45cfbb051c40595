"""Payroll System package.

Feature modules (employees, payroll, ...) with a thin Flask controller layer
on top of service/repository layers. The shift calculator and the period
aggregator under ``payroll`` are pure and carry all the money rules.
"""
