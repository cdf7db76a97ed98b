# Share Feature - Schemas

from pydantic import BaseModel


class ShareLinkResponse(BaseModel):
    """Schema for an outbound share link."""
    url: str
    message: str
    share_url: str
