"""Share link schemas"""

from pydantic import Field

from app.schemas.common import CamelModel


class CreateShareLinkRequest(CamelModel):
    attempt_id: str = Field(..., min_length=1)


class ShareLinkResponse(CamelModel):
    slug: str
    url: str
    og_title: str
    og_description: str


class LinkedInPostRequest(CamelModel):
    attempt_id: str = Field(..., min_length=1)
