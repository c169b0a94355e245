"""Shared fixtures: a fixed clock, a sample volume and an in-memory asset lookup."""
from __future__ import annotations

from typing import Optional

import pytest

from s3_secure_downloads.models.asset import Asset, PluginSettings, StoreConfig

NOW = 1_000_000_000
KEY_ID = "AKIDEXAMPLE"
SECRET = "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY"
BUCKET = "docs-bucket"


class InMemoryAssets:
    def __init__(self, *assets: Asset):
        self._assets = {a.uid: a for a in assets}
        self.lookups: list[str] = []

    def find_asset_by_uid(self, uid: str) -> Optional[Asset]:
        self.lookups.append(uid)
        return self._assets.get(uid)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def store() -> StoreConfig:
    return StoreConfig(keyId=KEY_ID, secret=SECRET, bucket=BUCKET, subfolder="uploads/")


@pytest.fixture
def asset(store) -> Asset:
    return Asset(uid="asset-1", filename="report.pdf", folderPath="", volume=store)


@pytest.fixture
def assets(asset) -> InMemoryAssets:
    return InMemoryAssets(asset)


@pytest.fixture
def plugin_settings() -> PluginSettings:
    return PluginSettings(linkExpirationTimeSeconds=3600)
