from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.features.auth.schemas import Principal
from app.features.auth.service import AuthService
from app.shared.exceptions import CredentialsException


# HTTP Bearer security scheme; auto_error is off so a missing header is a 401, not a 403
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Principal:
    """
    Dependency gating every store-backed endpoint on an anonymous identity.

    Raises:
        CredentialsException: If the token is missing or invalid
    """
    if credentials is None:
        raise CredentialsException("Identity not ready. Sign in anonymously first.")

    principal = AuthService.principal_from_token(credentials.credentials)
    if principal is None:
        raise CredentialsException("Invalid authentication credentials")

    return principal
