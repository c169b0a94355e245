from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from s3_secure_downloads.core.auth import require_logged_in_user
from s3_secure_downloads.core.config import settings
from s3_secure_downloads.core.errors import InvalidAsset, InvalidConfiguration, NoAssetDefined
from s3_secure_downloads.models.asset import SigningOptions
from s3_secure_downloads.models.signing import SignedUrlResponse
from s3_secure_downloads.services.assets import AssetRepository
from s3_secure_downloads.services.hooks import load_hooks
from s3_secure_downloads.services.signer import SignUrlService

router = APIRouter()


@lru_cache(maxsize=1)
def get_sign_url_service() -> SignUrlService:
    """
    Built once per process from the loaded settings.
    """
    return SignUrlService(
        assets=AssetRepository(settings.assets_index_path, settings.assets_cache_ttl_sec),
        plugin_settings=settings.plugin_settings(),
        hooks=load_hooks(settings.sign_hooks_list),
    )


def _sign(service: SignUrlService, uid: Optional[str], filename: Optional[str]) -> str:
    if not uid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing uid")

    try:
        return service.get_signed_url(uid, SigningOptions(filename=filename))
    except NoAssetDefined as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (InvalidAsset, InvalidConfiguration) as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e


@router.get("")
def download_proxy(
    uid: Optional[str] = Query(None),
    filename: Optional[str] = Query(None, description="Override for forced downloads"),
    _: bool = Depends(require_logged_in_user),
    service: SignUrlService = Depends(get_sign_url_service),
):
    """
    Redirects (302) to a short-lived signed URL for the asset.
    """
    return RedirectResponse(_sign(service, uid, filename), status_code=status.HTTP_302_FOUND)


@router.get("/signed", response_model=SignedUrlResponse)
def download_proxy_signed(
    uid: Optional[str] = Query(None),
    filename: Optional[str] = Query(None),
    _: bool = Depends(require_logged_in_user),
    service: SignUrlService = Depends(get_sign_url_service),
):
    """
    Same as the redirect, but returns the signed URL as JSON.
    """
    url = _sign(service, uid, filename)
    return SignedUrlResponse(
        uid=uid,
        signedUrl=url,
        expiresInSec=service.plugin_settings.linkExpirationTimeSeconds,
    )
