import dataclasses
import logging
import os
import sys
from typing import Protocol

from loki_logger_handler.loki_logger_handler import LokiLoggerHandler

from mission_gallery.services.ray_id_service import ray_id_context
from mission_gallery.utils import as_bool
from mission_gallery.utils import env


APP_LABEL = "mission-gallery"

# chatty at INFO; only their warnings are interesting
NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "httpx", "httpcore", "PIL")


class LoggingConfig(Protocol):
    log_level: str
    loki_enabled: bool
    loki_url: str
    environment: str


@dataclasses.dataclass
class StandaloneLoggingConfig:
    """Logging settings for the upload CLI and scripts, which run without the API Config."""

    log_level: str = env("LOG_LEVEL:WARNING")
    loki_enabled: bool = env("LOKI_ENABLED:false", convert=as_bool)
    loki_url: str = env("LOKI_URL:", convert=str)
    environment: str = env("ENVIRONMENT:local")


class RayIDFilter(logging.Filter):
    """Logging filter that ensures ray_id is always present in log records.

    Reads ray_id from the contextvar if the record does not carry one yet,
    so the format string never fails outside of a request.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "ray_id"):
            record.ray_id = ray_id_context.get()
        return True


def setup_loki_logging(config: LoggingConfig, service_name: str, include_ray_id: bool = True) -> logging.Logger:
    """
    Configure root logging for one gallery process.

    Args:
        config: Anything carrying log_level, loki_enabled, loki_url, environment
        service_name: Loki "service" label and returned logger name ("api", "uploader", "migrator")
        include_ray_id: Whether to include ray_id in log format (default: True)

    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if config.loki_enabled and config.loki_url:
        handlers.append(
            LokiLoggerHandler(
                url=config.loki_url,
                labels={
                    "app": APP_LABEL,
                    "service": service_name,
                    "environment": config.environment,
                    "host": os.getenv("HOSTNAME", "unknown"),
                },
                timeout=10,
                compressed=True,
            )
        )

    if include_ray_id:
        ray_id_filter = RayIDFilter()
        for handler in handlers:
            handler.addFilter(ray_id_filter)
        log_format = "%(asctime)s - [%(ray_id)s] - %(name)s - %(levelname)s - %(message)s"
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=log_level, format=log_format, handlers=handlers)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return logging.getLogger(service_name)
