# carbonsense/config.py
"""
Application configuration.

Values come from environment variables (a local .env file is loaded first) and are
grouped into small dataclasses. A single ``settings`` instance is created at import
time and shared by the app.
"""
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class DatabaseConfig:
    url: str
    echo: bool = False


@dataclass
class ServiceConfig:
    """Third-party endpoints: routing, ML prediction and the eco assistant."""
    ors_api_key: Optional[str]
    ors_base_url: str = "https://api.openrouteservice.org"
    ml_predict_url: str = "https://carbon-ml-backend.onrender.com/predict"
    request_timeout: int = 30
    gemini_api_key: Optional[str] = None
    gemini_url: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-1.5-flash:generateContent"
    )


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


def _env_flag(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() == "true"


class Settings:
    def __init__(self):
        self.environment = Environment(os.getenv("ENVIRONMENT", "development"))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        default_db = f"sqlite:///{BASE_DIR / 'data' / 'carbon.db'}"
        self.database = DatabaseConfig(
            url=os.getenv("DATABASE_URL", default_db),
            echo=_env_flag("DATABASE_ECHO"),
        )

        self.services = ServiceConfig(
            ors_api_key=os.getenv("ORS_API_KEY") or None,
            ors_base_url=os.getenv("ORS_BASE_URL", "https://api.openrouteservice.org"),
            ml_predict_url=os.getenv(
                "ML_PREDICT_URL", "https://carbon-ml-backend.onrender.com/predict"
            ),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", 30)),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_url=os.getenv("GEMINI_URL", ServiceConfig.gemini_url),
        )

        self.server = ServerConfig(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8000)),
        )

        self.log_level = LogLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        self.log_to_file = _env_flag("LOG_TO_FILE")
        self.log_dir = Path(os.getenv("LOG_DIR", str(BASE_DIR / "logs")))
        self.log_format = os.getenv(
            "LOG_FORMAT", "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )

    def _validate_config(self):
        errors = []
        if not 1 <= self.server.port <= 65535:
            errors.append(f"PORT {self.server.port} is out of range (1-65535)")
        if self.services.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be a positive number of seconds")
        if not self.database.url:
            errors.append("DATABASE_URL is empty")
        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"- {e}" for e in errors))

    def is_sqlite(self) -> bool:
        return self.database.url.startswith("sqlite")

    def get_logging_config(self) -> Dict[str, Any]:
        handlers = ["console"]
        handler_defs: Dict[str, Any] = {
            "console": {
                "class": "logging.StreamHandler",
                "level": self.log_level.value,
                "formatter": "default",
                "stream": sys.stdout,
            }
        }
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append("file")
            handler_defs["file"] = {
                "class": "logging.handlers.RotatingFileHandler",
                "level": self.log_level.value,
                "formatter": "default",
                "filename": str(self.log_dir / f"carbonsense_{self.environment.value}.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf-8",
            }

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": self.log_format, "datefmt": "%Y-%m-%d %H:%M:%S"}
            },
            "handlers": handler_defs,
            "loggers": {
                "carbonsense": {
                    "level": self.log_level.value,
                    "handlers": handlers,
                    "propagate": False,
                },
                "urllib3": {"level": "WARNING", "handlers": handlers, "propagate": False},
            },
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment.value,
            "database_url": self.database.url,
            "ors_configured": bool(self.services.ors_api_key),
            "assistant_configured": bool(self.services.gemini_api_key),
            "ml_predict_url": self.services.ml_predict_url,
            "server": {"host": self.server.host, "port": self.server.port},
            "log_level": self.log_level.value,
        }


settings = Settings()
