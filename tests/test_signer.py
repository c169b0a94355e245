from unittest.mock import MagicMock

import pytest

from s3_secure_downloads.core.errors import InvalidAsset, InvalidConfiguration, NoAssetDefined
from s3_secure_downloads.models.asset import Asset, PluginSettings, SigningOptions, StoreConfig
from s3_secure_downloads.services.hooks import AssetOverride, BaseSignHook, HookDispatcher
from s3_secure_downloads.services.legacy_v2 import FallbackSigner
from s3_secure_downloads.services.results import SignResult
from s3_secure_downloads.services.signer import SignUrlService, download_filename

from conftest import InMemoryAssets, NOW


def _primary(result: SignResult) -> MagicMock:
    primary = MagicMock()
    primary.name = "primary"
    primary.sign.return_value = result
    return primary


def _fallback() -> MagicMock:
    fallback = MagicMock(wraps=FallbackSigner())
    fallback.name = "fallback"
    return fallback


def _service(assets, plugin_settings, clock, **kwargs) -> SignUrlService:
    return SignUrlService(assets=assets, plugin_settings=plugin_settings, clock=clock, **kwargs)


def test_primary_url_is_returned(assets, plugin_settings, clock, store):
    primary = _primary(SignResult.success("https://signed.example/report.pdf"))
    fallback = _fallback()

    url = _service(assets, plugin_settings, clock, primary=primary, fallback=fallback).get_signed_url("asset-1")

    assert url == "https://signed.example/report.pdf"
    primary.sign.assert_called_once_with(store, "uploads/report.pdf", NOW + 3600, None)
    fallback.sign.assert_not_called()


def test_fallback_used_once_when_primary_fails(assets, plugin_settings, clock, store):
    fallback = _fallback()
    service = _service(
        assets, plugin_settings, clock,
        primary=_primary(SignResult.failure("boom")),
        fallback=fallback,
    )

    url = service.get_signed_url("asset-1")

    fallback.sign.assert_called_once_with(store, "uploads/report.pdf", NOW + 3600, None)
    assert url == FallbackSigner().sign(store, "uploads/report.pdf", NOW + 3600)
    assert url.startswith("https://docs-bucket.s3.amazonaws.com/uploads/report.pdf?AWSAccessKeyId=")
    assert url.endswith("&Expires=1000003600")


def test_real_primary_signer_end_to_end(assets, plugin_settings, clock):
    url = _service(assets, plugin_settings, clock).get_signed_url("asset-1")
    assert "X-Amz-Signature=" in url


@pytest.mark.parametrize("uid", ["", None])
def test_empty_uid(assets, plugin_settings, clock, uid):
    with pytest.raises(NoAssetDefined):
        _service(assets, plugin_settings, clock).get_signed_url(uid)
    assert assets.lookups == []


def test_unknown_asset(assets, plugin_settings, clock):
    with pytest.raises(NoAssetDefined):
        _service(assets, plugin_settings, clock).get_signed_url("missing")


def test_hook_clearing_asset_aborts_before_signing(assets, plugin_settings, clock):
    class Clear(BaseSignHook):
        def before_sign(self, event):
            return AssetOverride(None)

    primary, fallback = MagicMock(), MagicMock()
    service = _service(
        assets, plugin_settings, clock,
        hooks=HookDispatcher([Clear()]),
        primary=primary,
        fallback=fallback,
    )

    with pytest.raises(NoAssetDefined):
        service.get_signed_url("asset-1")
    primary.sign.assert_not_called()
    fallback.sign.assert_not_called()


def test_hook_can_supply_missing_asset(plugin_settings, clock, asset):
    class Supply(BaseSignHook):
        def before_sign(self, event):
            return AssetOverride(asset)

    primary = _primary(SignResult.success("https://signed.example/x"))
    service = _service(
        InMemoryAssets(), plugin_settings, clock,
        hooks=HookDispatcher([Supply()]),
        primary=primary,
    )

    assert service.get_signed_url("ghost") == "https://signed.example/x"


def test_after_hook_sees_result(assets, plugin_settings, clock):
    seen = []

    class Record(BaseSignHook):
        def after_sign(self, event):
            seen.append((event.uid, event.key, event.url, event.signer))

    service = _service(
        assets, plugin_settings, clock,
        hooks=HookDispatcher([Record()]),
        primary=_primary(SignResult.failure("boom")),
    )
    url = service.get_signed_url("asset-1")

    assert seen == [("asset-1", "uploads/report.pdf", url, "fallback")]


def test_forced_download_uses_override(assets, clock, store):
    primary = _primary(SignResult.success("https://signed.example/x"))
    service = _service(
        assets, PluginSettings(linkExpirationTimeSeconds=60, forceFileDownload=True), clock,
        primary=primary,
    )

    service.get_signed_url("asset-1", SigningOptions(filename="Q1 report.pdf"))
    primary.sign.assert_called_once_with(store, "uploads/report.pdf", NOW + 60, "Q1 report.pdf")


def test_forced_download_falls_back_to_asset_filename(asset):
    assert download_filename(asset, SigningOptions(), True) == "report.pdf"
    assert download_filename(asset, SigningOptions(filename="other.pdf"), True) == "other.pdf"
    assert download_filename(asset, SigningOptions(filename="other.pdf"), False) is None


def test_missing_credentials_fail_before_signing(plugin_settings, clock):
    broken = Asset(uid="b", filename="x.pdf", volume=StoreConfig(bucket="docs-bucket"))
    primary = MagicMock()

    with pytest.raises(InvalidConfiguration) as exc:
        _service(InMemoryAssets(broken), plugin_settings, clock, primary=primary).get_signed_url("b")

    assert exc.value.missing == ["keyId", "secret"]
    primary.sign.assert_not_called()


def test_empty_filename_is_invalid_asset(plugin_settings, clock, store):
    nameless = Asset(uid="n", filename="", volume=store)
    with pytest.raises(InvalidAsset):
        _service(InMemoryAssets(nameless), plugin_settings, clock).get_signed_url("n")


def test_long_lifetime_uses_fallback(assets, clock, store):
    lifetime = 8 * 86400
    service = _service(assets, PluginSettings(linkExpirationTimeSeconds=lifetime), clock)

    url = service.get_signed_url("asset-1")

    assert url == FallbackSigner().sign(store, "uploads/report.pdf", NOW + lifetime)
    assert "X-Amz-Signature" not in url


def test_after_hook_cannot_change_returned_url(assets, plugin_settings, clock):
    class Rewrite(BaseSignHook):
        def after_sign(self, event):
            event.url = "https://evil.example/"

    service = _service(
        assets, plugin_settings, clock,
        hooks=HookDispatcher([Rewrite()]),
        primary=_primary(SignResult.success("https://signed.example/x")),
    )
    assert service.get_signed_url("asset-1") == "https://signed.example/x"
