# Share Feature - Router

from typing import Optional
from fastapi import APIRouter, Query
from app.config import settings
from app.features.share.schemas import ShareLinkResponse
from app.features.share.service import build_share_link, build_share_message


router = APIRouter(prefix="/share", tags=["Share"])


@router.get("", response_model=ShareLinkResponse)
async def get_share_link(
    url: Optional[str] = Query(None, description="Page address to share (defaults to SHARE_BASE_URL)")
):
    """
    Build a WhatsApp link inviting a family member to the calendar.

    The client opens `share_url` in a new window; nothing is sent from the server.
    """
    page_url = url or settings.SHARE_BASE_URL
    return ShareLinkResponse(
        url=page_url,
        message=build_share_message(page_url),
        share_url=build_share_link(page_url),
    )
