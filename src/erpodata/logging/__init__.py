"""erpodata logging: port and structlog adapter."""

from erpodata.logging.port import LoggingPort
from erpodata.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
