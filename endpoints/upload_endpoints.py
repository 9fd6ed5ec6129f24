from __future__ import annotations

import asyncio
import io
import logging
import re
import time
from typing import Any, Optional

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from settings import Settings

from .auth_endpoints import require_admin
from .errors import ApiError

router = APIRouter(prefix="/api/upload", tags=["upload"])
logger = logging.getLogger(__name__)

LIST_MAX_RESULTS = 100


class CloudinaryMedia:
    """
    Thin async wrapper over the Cloudinary SDK.

    Credentials are passed per call instead of through the SDK's global
    config, so each app instance keeps its own account.
    """

    def __init__(self, cloud_name: str | None, api_key: str | None, api_secret: str | None, folder: str):
        self._credentials = {"cloud_name": cloud_name, "api_key": api_key, "api_secret": api_secret}
        self.folder = folder

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryMedia":
        return cls(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            settings.upload_folder,
        )

    @property
    def configured(self) -> bool:
        return all(self._credentials.values())

    async def upload(self, data: bytes, public_id: str) -> dict[str, Any]:
        return await asyncio.to_thread(
            cloudinary.uploader.upload,
            io.BytesIO(data),
            folder=self.folder,
            public_id=public_id,
            resource_type="image",
            **self._credentials,
        )

    async def destroy(self, public_id: str) -> dict[str, Any]:
        return await asyncio.to_thread(cloudinary.uploader.destroy, public_id, **self._credentials)

    async def resources(self) -> list[dict[str, Any]]:
        result = await asyncio.to_thread(
            cloudinary.api.resources,
            type="upload",
            prefix=f"{self.folder}/",
            max_results=LIST_MAX_RESULTS,
            **self._credentials,
        )
        return list(result.get("resources", []))


def public_id_for(filename: str, *, now: float | None = None) -> str:
    """``My Photo.v2.jpg`` -> ``MyPhoto-<ms timestamp>``"""
    stem = filename.split(".", 1)[0]
    stem = re.sub(r"[^a-zA-Z0-9]", "", stem) or "image"
    millis = int((time.time() if now is None else now) * 1000)
    return f"{stem}-{millis}"


def get_media(request: Request) -> CloudinaryMedia:
    media: CloudinaryMedia = request.app.state.media
    if not media.configured:
        raise ApiError(503, "Upload unavailable", "Image uploads are not configured")
    return media


def _cloudinary_error(e: cloudinary.exceptions.Error) -> ApiError:
    logger.warning("Cloudinary call failed: %s", e)
    return ApiError(400, "Cloudinary Error", str(e) or "Cloudinary request failed")


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def upload_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    media: CloudinaryMedia = Depends(get_media),
) -> dict[str, Any]:
    if image is None:
        raise ApiError(400, "No file uploaded", "Please provide an image file")

    settings: Settings = request.app.state.settings
    # Read one byte past the limit so oversize files are caught without buffering them whole.
    data = await image.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise ApiError(400, "File too large", f"Image must be smaller than {limit_mb}MB")

    original_name = image.filename or "image"
    try:
        result = await media.upload(data, public_id_for(original_name))
    except cloudinary.exceptions.Error as e:
        raise _cloudinary_error(e) from e

    logger.info("Image uploaded: %s (%d bytes)", result.get("public_id"), len(data))
    return {
        "success": True,
        "message": "File uploaded successfully",
        "data": {
            "filename": result.get("public_id"),
            "originalName": original_name,
            "size": result.get("bytes", len(data)),
            "mimetype": image.content_type,
            "url": result.get("secure_url"),
        },
    }


@router.get("/list", dependencies=[Depends(require_admin)])
async def list_images(media: CloudinaryMedia = Depends(get_media)) -> dict[str, Any]:
    try:
        resources = await media.resources()
    except cloudinary.exceptions.Error as e:
        raise _cloudinary_error(e) from e

    return {
        "success": True,
        "data": [
            {
                "filename": r.get("public_id"),
                "url": r.get("secure_url"),
                "size": r.get("bytes"),
                "uploadedAt": r.get("created_at"),
            }
            for r in resources
        ],
    }


@router.delete("/{public_id:path}", dependencies=[Depends(require_admin)])
async def delete_image(public_id: str, media: CloudinaryMedia = Depends(get_media)) -> dict[str, Any]:
    try:
        result = await media.destroy(public_id)
    except cloudinary.exceptions.Error as e:
        raise _cloudinary_error(e) from e

    outcome = result.get("result")
    if outcome == "not found":
        raise ApiError(404, "File not found", f'Image "{public_id}" does not exist')
    if outcome != "ok":
        raise ApiError(400, "Delete failed", f"Cloudinary returned {outcome!r}")

    logger.info("Image deleted: %s", public_id)
    return {"success": True, "message": "File deleted successfully"}
