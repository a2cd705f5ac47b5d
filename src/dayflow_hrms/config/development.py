import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dayflow_hrms"),
}

MAIL_CONFIG = {
    "host": os.getenv("SMTP_HOST", "smtp.gmail.com"),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "username": os.getenv("EMAIL_USER"),
    "password": os.getenv("EMAIL_PASS"),
    "sender": os.getenv("EMAIL_SENDER", "Dayflow HRMS"),
    "use_tls": bool(int(os.getenv("SMTP_TLS", "1"))),
}

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo admin/employee accounts
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Re-check the leave balance when approving (default keeps apply-time check only)
LEAVE_RECHECK_BALANCE_ON_APPROVE = bool(int(os.getenv("LEAVE_RECHECK_BALANCE_ON_APPROVE", "0")))
