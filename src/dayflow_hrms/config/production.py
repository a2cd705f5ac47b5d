import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", "")
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

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

LEAVE_RECHECK_BALANCE_ON_APPROVE = bool(int(os.getenv("LEAVE_RECHECK_BALANCE_ON_APPROVE", "0")))
