from fastapi import APIRouter, status
from app.features.auth.schemas import AnonymousSessionResponse
from app.features.auth.service import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/anonymous", response_model=AnonymousSessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_in_anonymously():
    """
    Create an anonymous identity for this device.

    The returned token must be sent as a Bearer token on every records and
    medications request. Keep it on the device: the principal id is stable
    for as long as the token is reused.
    """
    return AuthService.sign_in_anonymously()
