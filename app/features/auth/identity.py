"""Device-side readiness gate for the anonymous identity."""

import asyncio
from typing import Awaitable, Callable, Optional, Union

from app.core.logging import logger
from app.features.auth.schemas import AnonymousSessionResponse
from app.features.auth.service import AuthService


SignIn = Callable[[], Union[AnonymousSessionResponse, Awaitable[AnonymousSessionResponse]]]


class IdentityNotReadyError(RuntimeError):
    """Raised when a remote call is attempted before sign-in completed."""


class IdentityGate:
    """
    Holds the device's anonymous principal.

    Remote reads and writes wait on `ensure()`; until it has succeeded the
    gate reports not ready.
    """

    def __init__(self, sign_in: Optional[SignIn] = None):
        self._sign_in = sign_in or AuthService.sign_in_anonymously
        self._session: Optional[AnonymousSessionResponse] = None
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._session is not None

    @property
    def principal_id(self) -> Optional[str]:
        return self._session.principal_id if self._session else None

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    async def ensure(self) -> str:
        """
        Sign in once and return the principal id.

        Raises:
            IdentityNotReadyError: If the sign-in call fails
        """
        async with self._lock:
            if self._session is not None:
                return self._session.principal_id

            logger.info("No identity found, signing in anonymously...")
            try:
                result = self._sign_in()
                if asyncio.iscoroutine(result):
                    result = await result
            except Exception as e:
                logger.error(f"Error signing in anonymously: {type(e).__name__}: {e}")
                raise IdentityNotReadyError(str(e)) from e

            self._session = result
            logger.info(f"Identity ready. Principal: {result.principal_id}")
            return result.principal_id

    def require(self) -> str:
        """Principal id, or IdentityNotReadyError if sign-in has not completed."""
        if self._session is None:
            raise IdentityNotReadyError("Authentication not ready")
        return self._session.principal_id
