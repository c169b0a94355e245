# s3_secure_downloads/services/paths.py
from __future__ import annotations

from typing import Optional

from s3_secure_downloads.core.errors import InvalidAsset
from s3_secure_downloads.models.asset import Asset


def normalize_subfolder(subfolder: Optional[str]) -> str:
    """
    "uploads", "uploads/" and "uploads///" all become "uploads/".
    An empty subfolder yields no prefix.
    """
    if not subfolder:
        return ""
    trimmed = subfolder.rstrip("/")
    if not trimmed:
        return ""
    return trimmed + "/"


def asset_path(asset: Asset) -> str:
    """
    Path of the asset inside its volume, without the subfolder prefix.
    """
    if not asset.filename:
        raise InvalidAsset(f"Asset {asset.uid!r} has no filename")

    if asset.folderPath:
        return asset.folderPath + asset.filename
    return asset.filename


def resolve_key(asset: Asset) -> str:
    """
    Object key for an asset: subfolder prefix + folder path + filename.
    Keys never start with a slash.
    """
    prefix = normalize_subfolder(asset.volume.subfolder)
    return (prefix + asset_path(asset)).lstrip("/")
