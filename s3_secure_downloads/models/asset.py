# s3_secure_downloads/models/asset.py
from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from s3_secure_downloads.core.env import parse_env
from s3_secure_downloads.core.errors import InvalidConfiguration


StoreType = Literal["s3", "s3-compatible"]


class PluginSettings(BaseModel):
    """
    Read-only plugin settings handed to the signing core.
    requireLoggedInUser is only consumed by the HTTP layer.
    """
    model_config = ConfigDict(frozen=True)

    requireLoggedInUser: bool = False
    linkExpirationTimeSeconds: int = Field(default=86400, ge=0)
    forceFileDownload: bool = False


class StoreConfig(BaseModel):
    """
    One bucket-backed volume.

    - type "s3" signs against the AWS global endpoint
    - type "s3-compatible" passes `endpoint` through to the client
    """
    model_config = ConfigDict(frozen=True)

    type: StoreType = "s3"
    region: str = "us-east-1"
    endpoint: Optional[str] = None
    keyId: Optional[str] = None
    secret: Optional[str] = None
    bucket: Optional[str] = None
    subfolder: Optional[str] = None
    url: Optional[str] = None
    hasUrls: bool = False

    @classmethod
    def from_volume(cls, raw: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> "StoreConfig":
        """
        Build a StoreConfig from raw volume settings, resolving $ENV references.
        """
        def env(name: str) -> Optional[str]:
            value = raw.get(name)
            if value is None:
                return None
            return parse_env(str(value), environ)

        endpoint = env("endpoint")
        region = env("region")

        return cls(
            type=raw.get("type") or "s3",
            region=region or "us-east-1",
            # Never hand the client an empty endpoint override
            endpoint=endpoint or None,
            keyId=env("keyId"),
            secret=env("secret"),
            bucket=env("bucket"),
            subfolder=env("subfolder"),
            url=env("url"),
            hasUrls=bool(raw.get("hasUrls", False)),
        )

    @property
    def endpoint_override(self) -> Optional[str]:
        if self.type != "s3-compatible":
            return None
        return self.endpoint or None

    def validate_or_raise(self) -> None:
        missing = []
        if not self.keyId:
            missing.append("keyId")
        if not self.secret:
            missing.append("secret")
        if not self.bucket:
            missing.append("bucket")

        if missing:
            raise InvalidConfiguration(missing)


class Asset(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    filename: str
    folderPath: str = ""
    volume: StoreConfig


class SigningOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Only used when forced download is enabled
    filename: Optional[str] = None
