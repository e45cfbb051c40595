"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CONSUMPTION_DISCOUNT_RATE = 0.15
ROUNDING_STEP = 50
MONEY_DECIMALS = 2
FORTNIGHT_SPLIT_DAY = 15
MINUTES_PER_DAY = 24 * 60

DEFAULT_HOURLY_RATE = 6500
MAX_CONSUMPTION_DESCRIPTION = 200
MAX_NOTES_LENGTH = 500
