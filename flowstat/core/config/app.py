"""
Application-specific settings.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and logging.

    Operational Note:
        - SERVER_IP overrides the discovered local address that is stamped on
          every report record. Leave it empty to resolve the address at startup.
    """
    PROJECT_NAME: str = "flowstat-reporter"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    SERVER_IP: Optional[str] = None
