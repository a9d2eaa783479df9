"""
Development settings: debug on, any host, verbose Channels logging.
Do not use in production.
"""
from .base import *  # noqa

DEBUG = True
ALLOWED_HOSTS = ["*"]
CSRF_TRUSTED_ORIGINS = env_list("CSRF_TRUSTED_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000")  # noqa: F405

LOGGING["loggers"]["channels"] = {"handlers": ["console"], "level": "DEBUG", "propagate": False}  # noqa: F405
