"""
Image storage on the asset host (Cloudinary).

Routes only see the `AssetHost` protocol; tests swap in a fake through the
`get_asset_host` dependency.
"""
from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import Protocol

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from yelpcamp.core.config import Settings
from yelpcamp.errors import AssetHostError, ImageValidationError

logger = logging.getLogger(__name__)

IMAGE_NAME_RE = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    asset_id: str


class AssetHost(Protocol):
    def upload(self, filename: str, content: bytes) -> UploadedAsset: ...
    def destroy(self, asset_id: str) -> None: ...


def validate_image_filename(filename: str | None) -> str:
    if not filename or not IMAGE_NAME_RE.search(filename):
        raise ImageValidationError()
    return filename


class CloudinaryAssetHost:
    def __init__(self, cloud_name: str, api_key: str | None, api_secret: str | None):
        self.configured = bool(api_key and api_secret)
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryAssetHost":
        return cls(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
        )

    def _check(self) -> None:
        if not self.configured:
            raise AssetHostError("Image host credentials are not configured")

    def upload(self, filename: str, content: bytes) -> UploadedAsset:
        self._check()
        try:
            result = cloudinary.uploader.upload(io.BytesIO(content), filename_override=filename)
        except CloudinaryError as e:
            logger.warning("image upload failed: %s", e)
            raise AssetHostError(str(e)) from e
        return UploadedAsset(url=result["secure_url"], asset_id=result["public_id"])

    def destroy(self, asset_id: str) -> None:
        self._check()
        try:
            result = cloudinary.uploader.destroy(asset_id)
        except CloudinaryError as e:
            logger.warning("image destroy failed for %s: %s", asset_id, e)
            raise AssetHostError(str(e)) from e
        if result.get("result") not in ("ok", "not found"):
            raise AssetHostError(f"Could not delete image {asset_id}")
