# task_tracker/app/config.py
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Настройки сервиса через переменные окружения (+ .env, если есть)."""

    def __init__(self) -> None:
        self.PROJECT_NAME = os.getenv("TASK_TRACKER_PROJECT_NAME", "task_tracker")
        self.HOST = os.getenv("TASK_TRACKER_HOST", "0.0.0.0")
        self.PORT = int(os.getenv("TASK_TRACKER_PORT", "8080"))
        self.DEBUG = os.getenv("TASK_TRACKER_DEBUG", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("TASK_TRACKER_LOG_LEVEL", "INFO").upper()

        # без AUDIT_URL события в audit-сервис не отправляются
        self.AUDIT_URL: Optional[str] = os.getenv("AUDIT_URL") or None


settings = Settings()
