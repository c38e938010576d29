import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    DB_POOL_SIZE = int(data.get("DB_POOL_SIZE", 5))
    DB_MAX_OVERFLOW = int(data.get("DB_MAX_OVERFLOW", 10))
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    APP_ENV = data.get("APP_ENV", "development")
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    # local | managed; derived from APP_ENV and DB_URI when unset
    DEPLOYMENT_ENVIRONMENT = data.get("DEPLOYMENT_ENVIRONMENT")
    IDP_API_URL = data.get("IDP_API_URL", "https://api.clerk.com/v1")
    IDP_SECRET_KEY = data.get("IDP_SECRET_KEY", "")
    IDP_TIMEOUT_SECONDS = float(data.get("IDP_TIMEOUT_SECONDS", 5))
    TENANT_HEADER = data.get("TENANT_HEADER", "x-account-id")
    TENANT_SETTING_KEY = data.get("TENANT_SETTING_KEY", "app.account_id")
    BOOTSTRAP_SUPER_USERS = data.get(
        "BOOTSTRAP_SUPER_USERS", ["dev@localhost.com", "admin@localhost.com"]
    )
