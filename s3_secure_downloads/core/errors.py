# s3_secure_downloads/core/errors.py
from __future__ import annotations


class SignUrlError(Exception):
    """Base class for errors that abort a sign operation."""


class NoAssetDefined(SignUrlError):
    def __init__(self, message: str = "No asset defined"):
        super().__init__(message)


class InvalidAsset(SignUrlError):
    pass


class InvalidConfiguration(SignUrlError):
    def __init__(self, missing: list[str] | None = None, message: str | None = None):
        self.missing = list(missing or [])
        if message is None:
            message = "Store configuration is missing: " + ", ".join(self.missing)
        super().__init__(message)
