# s3_secure_downloads/services/signer.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from s3_secure_downloads.core.errors import NoAssetDefined
from s3_secure_downloads.models.asset import Asset, PluginSettings, SigningOptions
from s3_secure_downloads.services.assets import AssetLookup
from s3_secure_downloads.services.expiration import expires_at
from s3_secure_downloads.services.hooks import HookDispatcher, SignEvent
from s3_secure_downloads.services.legacy_v2 import FallbackSigner
from s3_secure_downloads.services.paths import resolve_key
from s3_secure_downloads.services.storage_s3 import PrimarySigner

logger = logging.getLogger("S3SecureDownloads-Signer")


def download_filename(asset: Asset, options: SigningOptions, force_download: bool) -> Optional[str]:
    """
    Filename for the attachment disposition, or None when downloads are
    not forced. A caller-supplied filename wins over the asset's own.
    """
    if not force_download:
        return None
    return options.filename or asset.filename


class SignUrlService:
    """
    Turns an asset uid into a short-lived signed GET URL.

    The native presign is always tried first; the legacy V2 URL is only
    built when it fails. Both extension points fire on every call.
    """

    def __init__(
        self,
        assets: AssetLookup,
        plugin_settings: PluginSettings,
        hooks: HookDispatcher | None = None,
        primary: PrimarySigner | None = None,
        fallback: FallbackSigner | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.assets = assets
        self.plugin_settings = plugin_settings
        self.hooks = hooks or HookDispatcher()
        self.clock = clock
        self.primary = primary or PrimarySigner(clock=clock)
        self.fallback = fallback or FallbackSigner()

    def get_signed_url(self, uid: str, options: SigningOptions | None = None) -> str:
        if not uid:
            raise NoAssetDefined()
        options = options or SigningOptions()

        event = SignEvent(uid=uid, asset=self.assets.find_asset_by_uid(uid), options=options)

        asset = self.hooks.before_sign(event)
        if asset is None:
            raise NoAssetDefined()

        store = asset.volume
        store.validate_or_raise()

        key = resolve_key(asset)
        expiry = expires_at(int(self.clock()), self.plugin_settings.linkExpirationTimeSeconds)
        filename = download_filename(asset, options, self.plugin_settings.forceFileDownload)

        signer = self.primary.name
        result = self.primary.sign(store, key, expiry, filename)
        if result.ok:
            url = result.url
        else:
            logger.warning("Primary signing failed for %s (%s), using legacy signature", uid, result.reason)
            signer = self.fallback.name
            url = self.fallback.sign(store, key, expiry, filename)

        event.key = key
        event.url = url
        event.signer = signer
        self.hooks.after_sign(event)

        logger.info("Signed %s via %s signer, expires at %d", key, signer, expiry)
        return url
