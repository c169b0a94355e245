from __future__ import annotations

import logging

from fastapi import FastAPI

from s3_secure_downloads.core.config import settings
from s3_secure_downloads.routes.download_proxy import router as download_proxy_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="S3 Secure Downloads", version="1.0.0")

# Routers
app.include_router(download_proxy_router, prefix="/download-proxy", tags=["downloads"])


@app.get("/health")
def health():
    return {"ok": True, "service": "s3-secure-downloads"}
