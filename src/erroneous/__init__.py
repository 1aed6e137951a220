"""Wrap exceptions with a call stack, key/value context and an HTTP status."""

from erroneous.config import Settings, get_settings
from erroneous.context import ERRONEOUS_ERROR_KEY
from erroneous.error_utils import describe, log_error, wrap_exceptions
from erroneous.errors import DEFAULT_HTTP_CODE, HTTP_CODE_KEY, AnnotatedError, wrap
from erroneous.protocols import Error
from erroneous.stack import CallStack, Frame

__all__ = [
    "AnnotatedError",
    "CallStack",
    "DEFAULT_HTTP_CODE",
    "ERRONEOUS_ERROR_KEY",
    "Error",
    "Frame",
    "HTTP_CODE_KEY",
    "Settings",
    "describe",
    "get_settings",
    "log_error",
    "wrap",
    "wrap_exceptions",
]
