import uuid
from typing import Optional
from app.core.security import create_access_token, decode_token
from app.core.logging import logger
from app.features.auth.schemas import AnonymousSessionResponse, Principal


ANONYMOUS_TOKEN_TYPE = "anonymous"


class AuthService:
    """Anonymous per-device identity."""

    @staticmethod
    def sign_in_anonymously() -> AnonymousSessionResponse:
        """Issue a token for a fresh, stable-per-device principal id."""
        principal_id = str(uuid.uuid4())
        access_token = create_access_token(
            data={"sub": principal_id, "type": ANONYMOUS_TOKEN_TYPE}
        )

        logger.info(f"Anonymous sign-in ready. Principal: {principal_id}")

        return AnonymousSessionResponse(
            access_token=access_token,
            token_type="bearer",
            principal_id=principal_id,
        )

    @staticmethod
    def principal_from_token(token: str) -> Optional[Principal]:
        """Resolve a token to its principal, or None if it is not valid."""
        payload = decode_token(token)
        if payload is None:
            return None

        if payload.get("type") != ANONYMOUS_TOKEN_TYPE:
            logger.warning(f"Invalid token type: {payload.get('type')}, expected '{ANONYMOUS_TOKEN_TYPE}'")
            return None

        principal_id = payload.get("sub")
        if not principal_id:
            return None

        return Principal(principal_id=principal_id)
