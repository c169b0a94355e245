# s3_secure_downloads/services/storage_s3.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3_secure_downloads.models.asset import StoreConfig
from s3_secure_downloads.services.results import SignResult

logger = logging.getLogger("S3SecureDownloads-Storage")

# S3 rejects SigV4 presigned URLs valid for longer than 7 days
SIGV4_MAX_EXPIRES_SEC = 604800


def get_s3_client(store: StoreConfig):
    """
    Client for one volume. The endpoint override is only passed for
    S3-compatible stores; otherwise boto3 uses the AWS global endpoint.
    """
    kwargs = {}
    addressing_style = "auto"
    if store.endpoint_override is not None:
        kwargs["endpoint_url"] = store.endpoint_override
        addressing_style = "path"

    return boto3.client(
        "s3",
        aws_access_key_id=store.keyId,
        aws_secret_access_key=store.secret,
        region_name=store.region,
        config=Config(signature_version="s3v4", s3={"addressing_style": addressing_style}),
        **kwargs,
    )


def attachment_disposition(filename: str) -> str:
    return f'attachment; filename="{filename}"'


def generate_presigned_url(
    store: StoreConfig,
    key: str,
    expires_in: int,
    download_filename: Optional[str] = None,
) -> SignResult:
    params = {"Bucket": store.bucket, "Key": key}
    if download_filename is not None:
        params["ResponseContentDisposition"] = attachment_disposition(download_filename)

    try:
        s3 = get_s3_client(store)
        url = s3.generate_presigned_url(
            "get_object",
            Params=params,
            ExpiresIn=expires_in,
        )
    except (ClientError, BotoCoreError, ValueError) as e:
        logger.warning("Presign failed for bucket=%s key=%s: %s", store.bucket, key, e)
        return SignResult.failure(f"{type(e).__name__}: {e}")

    if not url:
        return SignResult.failure("Presign returned an empty URL")
    return SignResult.success(url)


class PrimarySigner:
    """
    Presigned GET through the store's native (SigV4) signing protocol.
    Never raises for protocol errors; returns SignResult.failure instead.
    """

    name = "primary"

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def sign(
        self,
        store: StoreConfig,
        key: str,
        expires_at: int,
        download_filename: Optional[str] = None,
    ) -> SignResult:
        expires_in = max(0, expires_at - int(self._clock()))
        if expires_in > SIGV4_MAX_EXPIRES_SEC:
            return SignResult.failure("expiry exceeds SigV4 maximum")
        return generate_presigned_url(store, key, expires_in, download_filename)
