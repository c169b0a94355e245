# s3_secure_downloads/services/legacy_v2.py
"""
Legacy (V2-style) query-string signing for stores without SigV4 support.

The URL is built by hand:

    GET\\n\\n\\n{expires}\\n/{bucket}/{resource}[?response-content-disposition=...]

is signed with HMAC-SHA1 under the secret key, and the signature is sent
as `Signature` next to `AWSAccessKeyId` and `Expires`. No I/O happens here.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional
from urllib.parse import quote, quote_plus

from s3_secure_downloads.core.errors import InvalidConfiguration
from s3_secure_downloads.models.asset import StoreConfig


def encode_resource(key: str) -> str:
    """
    RFC 3986 encoding with "/" and "+" kept literal, minus one leading slash.
    """
    resource = quote(key, safe="").replace("%2F", "/").replace("%2B", "+")
    if resource.startswith("/"):
        resource = resource[1:]
    return resource


def string_to_sign(bucket: str, resource: str, expires: int, headers: dict[str, str]) -> str:
    out = f"GET\n\n\n{expires}\n/{bucket}/{resource}"
    append_char = "?"
    for header, value in headers.items():
        out += f"{append_char}{header}={value}"
        append_char = "&"
    return out


def sign_string(secret: str, text: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), text.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def base_url(store: StoreConfig, resource: str) -> str:
    if store.hasUrls:
        if not store.url:
            raise InvalidConfiguration(["url"])
        return f"{store.url.rstrip('/')}/{resource}?"
    return f"https://{store.bucket}.s3.amazonaws.com/{resource}?"


class FallbackSigner:
    """
    Deterministic: the same store, key, expiry and filename always give
    the same URL. Missing credentials raise InvalidConfiguration.
    """

    name = "fallback"

    def sign(
        self,
        store: StoreConfig,
        key: str,
        expires_at: int,
        download_filename: Optional[str] = None,
    ) -> str:
        store.validate_or_raise()

        headers: dict[str, str] = {}
        if download_filename is not None:
            headers["response-content-disposition"] = f"attachment; filename={download_filename}"

        resource = encode_resource(key)
        to_sign = string_to_sign(store.bucket, resource, expires_at, headers)

        final_url = base_url(store, resource)
        for header, value in headers.items():
            final_url += f"{header}={quote_plus(value)}&"

        signature = quote_plus(sign_string(store.secret, to_sign))
        final_url += f"AWSAccessKeyId={store.keyId}&Signature={signature}&Expires={expires_at}"

        return final_url
