from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request

from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .model import Employee

logger = logging.getLogger(__name__)


def employee_to_dict(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "full_name": e.full_name,
        "hourly_rate": e.hourly_rate,
        "is_active": e.is_active,
    }


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except NotFoundError as e:
                return jsonify({"success": False, "message": str(e)}), 404
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"success": False, "message": "Internal server error"}), 500

        return wrapper

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @json_errors
    def employees_list():
        return jsonify({"success": True, "data": [employee_to_dict(e) for e in service.list_active()]})

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @json_errors
    def employees_get(employee_id: int):
        return jsonify({"success": True, "data": employee_to_dict(service.get_employee(employee_id))})

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @json_errors
    def employees_update(employee_id: int):
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "hourly_rate" not in data:
            raise ValidationError("hourly_rate is required")
        employee = service.update_hourly_rate(employee_id, data["hourly_rate"])
        return jsonify({"success": True, "message": "Employee updated", "data": employee_to_dict(employee)})

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_deactivate")
    @json_errors
    def employees_deactivate(employee_id: int):
        employee = service.deactivate(employee_id)
        return jsonify({"success": True, "message": "Employee deactivated", "data": employee_to_dict(employee)})
