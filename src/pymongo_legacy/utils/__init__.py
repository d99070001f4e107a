"""Utility functions and helpers for pymongo-legacy."""

from .logging import set_dispatch_logging, setup_logging
from .mongo_logger import (
    LoggableComponent,
    LoggerClientOptions,
    LoggerEnvOptions,
    LoggerOptions,
    MongoLogger,
    SeverityLevel,
)

__all__ = [
    "set_dispatch_logging",
    "setup_logging",
    "LoggableComponent",
    "LoggerClientOptions",
    "LoggerEnvOptions",
    "LoggerOptions",
    "MongoLogger",
    "SeverityLevel",
]
