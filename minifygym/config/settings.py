"""MinifyGym configuration settings."""

import json
import os
from pathlib import Path
from typing import Annotated, Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from minifygym.common import FailurePolicy

PROJECT_ROOT = Path(__file__).parent.parent


def _split_names(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            return json.loads(text)
        return [part.strip() for part in text.split(",") if part.strip()]
    return value


class Settings(BaseSettings):
    """Application settings with environment variable support (``MINIFYGYM_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="MINIFYGYM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_minifiers: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["rjsmin", "calmjs"])
    default_measurements: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["gzip"])
    default_passes: int = Field(default=2, ge=0)
    default_comments: str = Field(
        default="some",
        description="Comment retention policy shared by generated runs: none, some or all.",
    )

    gzip_level: int = Field(default=9, ge=0, le=9)
    brotli_quality: int = Field(default=11, ge=0, le=11)

    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.FAIL_FAST,
        description="fail_fast raises if any trial fails; lenient ranks the trials that succeeded.",
    )

    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=10917)
    api_workers: int = Field(default=1)
    api_reload: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="logs")
    log_to_file: bool = Field(default=False)
    log_max_bytes: int = Field(default=10485760)
    log_backup_count: int = Field(default=5)

    @field_validator("default_minifiers", "default_measurements", mode="before")
    @classmethod
    def validate_names(cls, v):
        return _split_names(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        return str(v).upper() if v else "INFO"

    def measurement_options(self) -> Dict[str, Dict[str, Any]]:
        return {
            "gzip": {"level": self.gzip_level},
            "brotli": {"quality": self.brotli_quality},
        }

    def resolve_log_dir(self) -> Path:
        log_path = Path(self.log_dir)
        if not log_path.is_absolute():
            log_path = PROJECT_ROOT / self.log_dir
        return log_path

    def setup_log_directory(self) -> None:
        os.makedirs(self.resolve_log_dir(), exist_ok=True)


settings = Settings()


def get_logging_config() -> Dict[str, Any]:
    handlers: Dict[str, Any] = {
        "console": {
            "level": settings.log_level,
            "formatter": "standard",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        }
    }

    if settings.log_to_file:
        settings.setup_log_directory()
        log_path = settings.resolve_log_dir()
        handlers.update(
            {
                "file_main": {
                    "level": settings.log_level,
                    "formatter": "detailed",
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path / "minifygym.log"),
                    "maxBytes": settings.log_max_bytes,
                    "backupCount": settings.log_backup_count,
                    "encoding": "utf8",
                },
                "file_api": {
                    "level": settings.log_level,
                    "formatter": "detailed",
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path / "api.log"),
                    "maxBytes": settings.log_max_bytes,
                    "backupCount": settings.log_backup_count,
                    "encoding": "utf8",
                },
            }
        )

    main_handlers = ["console"] + (["file_main"] if settings.log_to_file else [])
    api_handlers = ["console"] + (["file_api"] if settings.log_to_file else [])

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "detailed": {
                "format": "%(asctime)s [%(levelname)s] %(name)s [%(filename)s:%(lineno)d] - %(message)s"
            },
        },
        "handlers": handlers,
        "loggers": {
            "minifygym": {
                "handlers": main_handlers,
                "level": settings.log_level,
                "propagate": False,
            },
            "minifygym.api": {
                "handlers": api_handlers,
                "level": settings.log_level,
                "propagate": False,
            },
            "uvicorn": {
                "handlers": main_handlers,
                "level": settings.log_level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": api_handlers,
                "level": "INFO",
                "propagate": False,
            },
        },
    }


def setup_logging(component_name: str = "cli", level: str = None):
    import logging.config

    config = get_logging_config()
    if level:
        for logger_config in config["loggers"].values():
            logger_config["level"] = level.upper()
        for handler_config in config["handlers"].values():
            handler_config["level"] = level.upper()
    logging.config.dictConfig(config)

    if component_name == "api":
        logger_name = "minifygym.api"
    else:
        logger_name = f"minifygym.{component_name}"

    logger = logging.getLogger(logger_name)
    logger.debug(f"Logging configured for {component_name} - File logging: {settings.log_to_file}")

    if settings.log_to_file:
        logger.debug(f"Log files will be written to: {settings.resolve_log_dir()}")

    return logger
