from __future__ import annotations

from pydantic import BaseModel


class SignedUrlResponse(BaseModel):
    """
    Response model when a client asks for the signed URL instead of a redirect.
    """
    uid: str
    signedUrl: str
    expiresInSec: int
