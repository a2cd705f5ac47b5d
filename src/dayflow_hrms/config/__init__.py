import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "dayflow_hrms.config.production"

    if env in {"test", "testing"}:
        return "dayflow_hrms.config.testing"

    return "dayflow_hrms.config.development"
