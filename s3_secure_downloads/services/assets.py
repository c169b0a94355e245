# s3_secure_downloads/services/assets.py
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Optional, Protocol

import orjson
from pydantic import ValidationError

from s3_secure_downloads.core.errors import InvalidConfiguration
from s3_secure_downloads.models.asset import Asset, StoreConfig

logger = logging.getLogger("S3SecureDownloads-Assets")


class AssetLookup(Protocol):
    def find_asset_by_uid(self, uid: str) -> Optional[Asset]: ...


def _loads(data: bytes) -> Any:
    return orjson.loads(data)


def _ensure_dict(obj: Any) -> dict:
    if isinstance(obj, dict):
        return obj
    return {}


def _ensure_list(obj: Any) -> list[dict]:
    if not isinstance(obj, list):
        return []
    return [item for item in obj if isinstance(item, dict)]


class AssetRepository:
    """
    Assets and volumes read from a JSON index:

    {
      "volumes": {"private": {"bucket": "$S3_BUCKET", "keyId": "...", ...}},
      "assets": [{"uid": "...", "filename": "a.pdf", "folderPath": "docs/", "volume": "private"}]
    }

    This repository:
    - caches the raw index bytes briefly
    - skips malformed entries
    - resolves $ENV references in volume settings on every lookup
    """

    def __init__(self, index_path: str | Path, cache_ttl_sec: int = 60):
        self.index_path = Path(index_path)
        self.cache_ttl_sec = cache_ttl_sec
        self._raw: bytes | None = None
        self._ts: float = 0.0

    def find_asset_by_uid(self, uid: str) -> Optional[Asset]:
        index = _ensure_dict(_loads(self._get_cached_raw()))
        volumes = _ensure_dict(index.get("volumes"))

        match = next(
            (a for a in _ensure_list(index.get("assets")) if a.get("uid") == uid),
            None,
        )
        if match is None:
            return None

        handle = match.get("volume")
        raw_volume = volumes.get(handle)
        if not isinstance(raw_volume, dict):
            logger.warning("Asset %s references unknown volume %r", uid, handle)
            return None

        try:
            volume = StoreConfig.from_volume(raw_volume)
        except ValidationError as e:
            raise InvalidConfiguration(message=f"Volume {handle!r} is misconfigured: {e}") from e

        try:
            return Asset(
                uid=uid,
                filename=match.get("filename") or "",
                folderPath=match.get("folderPath") or "",
                volume=volume,
            )
        except ValidationError as e:
            logger.warning("Skipping malformed asset %s: %s", uid, e)
            return None

    def invalidate(self) -> None:
        self._raw = None
        self._ts = 0.0

    def _get_cached_raw(self) -> bytes:
        now = time.time()
        if self._raw and (now - self._ts) < self.cache_ttl_sec:
            return self._raw

        try:
            raw = self.index_path.read_bytes()
        except FileNotFoundError:
            logger.warning("Asset index not found: %s", self.index_path)
            raw = b"{}"

        if not raw.strip():
            raw = b"{}"

        self._raw = raw
        self._ts = now
        return raw
