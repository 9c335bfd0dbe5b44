"""Error taxonomy shared by every snippet."""

import contextlib
import logging
from typing import Iterator, Optional

from google.api_core import exceptions as core_exceptions
from google.auth import exceptions as auth_exceptions

logger = logging.getLogger(__name__)


class SnippetError(Exception):
    """Base class for errors raised by the snippets."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class ConfigurationError(SnippetError, ValueError):
    """Caller supplied missing or invalid parameters (detected before any call)."""


class RemoteServiceError(SnippetError):
    """The remote call failed (auth, invalid argument, not found, quota, network)."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(operation, str(cause))
        self.cause = cause

    @property
    def code(self) -> Optional[int]:
        """HTTP status code reported by the transport, when there is one."""
        code = getattr(self.cause, "code", None)
        return int(code) if code is not None else None


class IntegrityError(SnippetError):
    """A fetched public key failed checksum verification or could not be parsed."""


@contextlib.contextmanager
def remote_call(operation: str) -> Iterator[None]:
    """Re-raise transport failures of ``operation`` as RemoteServiceError."""
    try:
        yield
    except (core_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
        logger.warning("%s failed: %s", operation, e)
        raise RemoteServiceError(operation, e) from e
