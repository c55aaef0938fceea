"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_PASSWORD_LENGTH = 6
DEFAULT_HISTORY_LIMIT = 30

# Punch window
DEFAULT_TOLERANCE_ENTRY_MINUTES = 10
DEFAULT_OVERTIME_MAX_MINUTES = 120
FIXED_MODE_BUFFER_MINUTES = 2

# Geolocation (meters)
EARTH_RADIUS_METERS = 6_371_000
EXACT_LOCATION_TOLERANCE_METERS = 50
DEFAULT_ALLOWED_RADIUS_METERS = 100

# Dashboard alerts (minutes worked today)
OVERTIME_ALERT_MINUTES = 10 * 60
MISSING_EXIT_ALERT_MINUTES = 9 * 60

# Payroll defaults
DEFAULT_TOLERANCE_MINUTES = 10
ALLOWED_CYCLE_START_DAYS = (1, 16, 21, 26)
DEFAULT_PAYMENT_WEEKDAY_PERCENT = 50
DEFAULT_PAYMENT_SATURDAY_PERCENT = 50
DEFAULT_PAYMENT_SUNDAY_PERCENT = 100
DEFAULT_PAYMENT_HOLIDAY_PERCENT = 100
DEFAULT_MIXED_HOURS_THRESHOLD = 20

# Vacation rules (CLT)
VACATION_DAYS_PER_PERIOD = 30
VACATION_MIN_DAYS = 5
VACATION_MAX_SELL_DAYS = 10
VACATION_MAX_FRACTIONS = 3
VACATION_MIN_LONG_FRACTION = 14
VACATION_OVERDUE_AFTER_MONTHS = 6

# Documents
DOCUMENT_EXPIRING_SOON_DAYS = 60

TOP_EMPLOYEES_LIMIT = 10
