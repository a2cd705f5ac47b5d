"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

FULL_DAY_MINUTES = 360
HALF_DAY_MINUTES = 180

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_PAYROLL_LIMIT = 12

DEFAULT_PAID_LEAVE_DAYS = 12
DEFAULT_SICK_LEAVE_DAYS = 6
DEFAULT_UNPAID_LEAVE_DAYS = 0

DEFAULT_JWT_EXPIRE_HOURS = 24
OTP_TTL_MINUTES = 10
RESET_TOKEN_TTL_MINUTES = 10
MIN_PASSWORD_LENGTH = 8

EMPLOYEE_CODE_PREFIX = "EMP"
DEFAULT_OVERRIDE_REASON = "Admin override"
DEFAULT_REJECT_COMMENT = "Rejected by admin"
