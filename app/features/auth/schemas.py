from pydantic import BaseModel


class AnonymousSessionResponse(BaseModel):
    """Schema for an anonymous device sign-in."""
    access_token: str
    token_type: str = "bearer"
    principal_id: str

    class Config:
        json_schema_extra = {
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "principal_id": "2f0c3f3e-1f53-4c8e-9a55-3b7d3b3f9a11",
            }
        }


class Principal(BaseModel):
    """Authenticated anonymous device."""
    principal_id: str
