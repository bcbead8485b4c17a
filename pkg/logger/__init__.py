"""
Logger package.
"""
from .logger import (
    setup_logging,
    get_logger,
    set_request_id,
    get_request_id,
    set_session_id,
    StructuredLogger,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "set_session_id",
    "StructuredLogger",
]
