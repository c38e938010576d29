import logging

import uvicorn

from config import ApplicationConfig
from tenant_authz.api.app import create_app

logging.basicConfig(
    level=ApplicationConfig.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(ApplicationConfig)

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        reload=ApplicationConfig.APP_ENV == "development",
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
