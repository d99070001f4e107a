"""Driver log configuration resolved from ``MONGODB_LOG_*`` environment variables."""

import logging
import os
import sys
import warnings
from collections.abc import Mapping
from enum import Enum
from typing import Any

from bson import json_util
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_DOCUMENT_LENGTH = 1000

_warned: set[str] = set()


class SeverityLevel(str, Enum):
    """Severity levels, most severe first."""

    EMERGENCY = "emergency"
    ALERT = "alert"
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warn"
    NOTICE = "notice"
    INFORMATIONAL = "info"
    DEBUG = "debug"
    TRACE = "trace"
    OFF = "off"


class LoggableComponent(str, Enum):
    """Driver components with their own severity setting."""

    COMMAND = "command"
    TOPOLOGY = "topology"
    SERVER_SELECTION = "serverSelection"
    CONNECTION = "connection"


_SEVERITY_ORDER = [level for level in SeverityLevel if level != SeverityLevel.OFF]

# Levels on the stdlib logging scale
_STDLIB_LEVELS = {
    SeverityLevel.EMERGENCY: logging.CRITICAL,
    SeverityLevel.ALERT: logging.CRITICAL,
    SeverityLevel.CRITICAL: logging.CRITICAL,
    SeverityLevel.ERROR: logging.ERROR,
    SeverityLevel.WARNING: logging.WARNING,
    SeverityLevel.NOTICE: 25,
    SeverityLevel.INFORMATIONAL: logging.INFO,
    SeverityLevel.DEBUG: logging.DEBUG,
    SeverityLevel.TRACE: 5,
}


def _enum_to_string(enum: type[Enum]) -> str:
    return ", ".join(f"'{member.value}'" for member in enum)


def _warn_once(message: str) -> None:
    if message in _warned:
        return
    _warned.add(message)
    warnings.warn(message, stacklevel=3)


def parse_severity(name: str, value: str | None) -> SeverityLevel | None:
    """Parse ``value`` as a severity level, ignoring case.

    Args:
        name: Name of the variable being parsed, used in the warning
        value: Raw value

    Returns:
        The severity, or None when the value is unset, empty or invalid.
        Empty and invalid values also emit a warning.
    """
    if value is None:
        return None

    try:
        return SeverityLevel(value.lower())
    except ValueError:
        warnings.warn(
            f"Value for {name} must be one of {_enum_to_string(SeverityLevel)}",
            stacklevel=2,
        )
        return None


def parse_max_document_length(value: str | None) -> int:
    if value is not None and value != "":
        try:
            parsed = int(value, 10)
        except ValueError:
            parsed = -1
        if parsed >= 0:
            return parsed
        _warn_once(
            f"MONGODB_LOG_MAX_DOCUMENT_LENGTH can only be a positive int value, got: {value}"
        )
    return DEFAULT_MAX_DOCUMENT_LENGTH


class LoggerEnvOptions(BaseModel):
    """Logger options as read from the environment."""

    MONGODB_LOG_COMMAND: str | None = Field(
        default=None, description="Severity level for command component"
    )
    MONGODB_LOG_TOPOLOGY: str | None = Field(
        default=None, description="Severity level for topology component"
    )
    MONGODB_LOG_SERVER_SELECTION: str | None = Field(
        default=None, description="Severity level for server selection component"
    )
    MONGODB_LOG_CONNECTION: str | None = Field(
        default=None, description="Severity level for connection pool component"
    )
    MONGODB_LOG_ALL: str | None = Field(
        default=None, description="Default severity level for unset components"
    )
    MONGODB_LOG_MAX_DOCUMENT_LENGTH: str | None = Field(
        default=None,
        description="Max length of embedded documents; 0 disables truncation",
    )
    MONGODB_LOG_PATH: str | None = Field(
        default=None, description="'stderr', 'stdout' or a file path"
    )

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "LoggerEnvOptions":
        """Read the options from ``environ`` (defaults to ``os.environ``)."""
        if environ is None:
            environ = os.environ
        return cls(**{name: environ.get(name) for name in cls.model_fields})


class LoggerClientOptions(BaseModel):
    """Logger options set on the client."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mongodb_log_path: Any = Field(
        default=None,
        description="'stderr', 'stdout', a file path or a writable stream",
    )


class LoggerOptions(BaseModel):
    """Fully resolved logger options."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    command: SeverityLevel = SeverityLevel.OFF
    topology: SeverityLevel = SeverityLevel.OFF
    server_selection: SeverityLevel = SeverityLevel.OFF
    connection: SeverityLevel = SeverityLevel.OFF
    default_severity: SeverityLevel = SeverityLevel.OFF
    max_document_length: int = Field(default=DEFAULT_MAX_DOCUMENT_LENGTH, ge=0)
    log_destination: Any = Field(
        default="stderr",
        description="'stderr', 'stdout', a file path or a writable stream",
    )


class MongoLogger:
    """Per-component severity filtered logger for driver events."""

    def __init__(self, options: LoggerOptions) -> None:
        self._owns_stream = False
        destination = options.log_destination
        if isinstance(destination, str):
            lowered = destination.lower()
            if lowered == "stderr":
                stream = sys.stderr
            elif lowered == "stdout":
                stream = sys.stdout
            else:
                stream = open(destination, "a+", encoding="utf-8")
                self._owns_stream = True
        else:
            stream = destination
        self.log_destination = stream

        self.component_severities: dict[LoggableComponent, SeverityLevel] = {
            LoggableComponent.COMMAND: options.command,
            LoggableComponent.TOPOLOGY: options.topology,
            LoggableComponent.SERVER_SELECTION: options.server_selection,
            LoggableComponent.CONNECTION: options.connection,
        }
        self.max_document_length = options.max_document_length

        # Not registered with logging.getLogger: each instance has its own handler
        self._logger = logging.Logger("pymongo_legacy.driver", level=1)
        self._handler = logging.StreamHandler(stream)
        self._handler.setFormatter(
            logging.Formatter("%(asctime)s [%(severity)s] %(component)s: %(message)s")
        )
        self._logger.addHandler(self._handler)

    @classmethod
    def resolve_options(
        cls,
        env_options: LoggerEnvOptions | None = None,
        client_options: LoggerClientOptions | None = None,
    ) -> LoggerOptions:
        """Merge environment and client options into resolved logger options.

        Environment variables win over client options. Component severities
        that are unset or invalid fall back to ``MONGODB_LOG_ALL``, which
        itself defaults to ``off``.

        Args:
            env_options: Options read from the environment (defaults to
                ``LoggerEnvOptions.from_environ()``)
            client_options: Options set on the client

        Returns:
            LoggerOptions: Options to build a :class:`MongoLogger` with
        """
        if env_options is None:
            env_options = LoggerEnvOptions.from_environ()

        default_severity = (
            parse_severity("MONGODB_LOG_ALL", env_options.MONGODB_LOG_ALL)
            or SeverityLevel.OFF
        )

        if env_options.MONGODB_LOG_PATH:
            log_destination = env_options.MONGODB_LOG_PATH
        elif client_options is not None and client_options.mongodb_log_path is not None:
            log_destination = client_options.mongodb_log_path
        else:
            log_destination = "stderr"

        return LoggerOptions(
            command=parse_severity("MONGODB_LOG_COMMAND", env_options.MONGODB_LOG_COMMAND)
            or default_severity,
            topology=parse_severity(
                "MONGODB_LOG_TOPOLOGY", env_options.MONGODB_LOG_TOPOLOGY
            )
            or default_severity,
            server_selection=parse_severity(
                "MONGODB_LOG_SERVER_SELECTION", env_options.MONGODB_LOG_SERVER_SELECTION
            )
            or default_severity,
            connection=parse_severity(
                "MONGODB_LOG_CONNECTION", env_options.MONGODB_LOG_CONNECTION
            )
            or default_severity,
            default_severity=default_severity,
            max_document_length=parse_max_document_length(
                env_options.MONGODB_LOG_MAX_DOCUMENT_LENGTH
            ),
            log_destination=log_destination,
        )

    def is_enabled(self, component: LoggableComponent, severity: SeverityLevel) -> bool:
        configured = self.component_severities[LoggableComponent(component)]
        if configured == SeverityLevel.OFF or severity == SeverityLevel.OFF:
            return False
        return _SEVERITY_ORDER.index(severity) <= _SEVERITY_ORDER.index(configured)

    def format_message(self, message: Any) -> str:
        if isinstance(message, str):
            return message
        text = json_util.dumps(message)
        if self.max_document_length and len(text) > self.max_document_length:
            return text[: self.max_document_length] + "..."
        return text

    def log(self, severity: SeverityLevel, component: LoggableComponent, message: Any) -> None:
        if not self.is_enabled(component, severity):
            return
        component = LoggableComponent(component)
        self._logger.log(
            _STDLIB_LEVELS[severity],
            self.format_message(message),
            extra={"severity": severity.value, "component": component.value},
        )

    def emergency(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.EMERGENCY, component, message)

    def alert(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.ALERT, component, message)

    def critical(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.CRITICAL, component, message)

    def error(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.ERROR, component, message)

    def warn(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.WARNING, component, message)

    def notice(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.NOTICE, component, message)

    def info(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.INFORMATIONAL, component, message)

    def debug(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.DEBUG, component, message)

    def trace(self, component: LoggableComponent, message: Any) -> None:
        self.log(SeverityLevel.TRACE, component, message)

    def close(self) -> None:
        """Detach the handler and close the destination if this logger opened it."""
        self._logger.removeHandler(self._handler)
        self._handler.flush()
        if self._owns_stream:
            self.log_destination.close()
