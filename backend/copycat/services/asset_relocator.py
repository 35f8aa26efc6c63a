import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from copycat.schemas.launch import LaunchRequest, ResolvedMetadata, UploadedAsset
from copycat.services.ipfs_service import UploadForm

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/png"
DEFAULT_IMAGE_FILENAME = "image.png"


def filename_from_url(url: str, default: str = DEFAULT_IMAGE_FILENAME) -> str:
    """Last non-empty path segment of ``url``, or ``default``"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return default
    if not parsed.scheme or not parsed.netloc:
        return default
    segments = [segment for segment in parsed.path.split("/") if segment]
    return segments[-1] if segments else default


class AssetRelocator:
    """Downloads the token image so it can be re-uploaded with the new metadata"""

    async def fetch_asset(self, client: httpx.AsyncClient, image_url: str) -> Optional[UploadedAsset]:
        if not image_url:
            return None
        try:
            response = await client.get(image_url)
        except Exception as e:
            logger.warning(f"Failed to download image {image_url}: {e}")
            return None

        if not response.is_success:
            logger.warning(f"Failed to download image: {response.status_code} ({image_url})")
            return None

        asset = UploadedAsset(
            content=response.content,
            content_type=response.headers.get("content-type") or DEFAULT_IMAGE_CONTENT_TYPE,
            filename=filename_from_url(image_url),
        )
        logger.info(f"Downloaded image {asset.filename} ({asset.content_type}, {len(asset.content)} bytes)")
        return asset


def build_upload_form(
    request: LaunchRequest,
    metadata: ResolvedMetadata,
    asset: Optional[UploadedAsset] = None,
) -> UploadForm:
    """
    Multipart parts for the pump.fun IPFS endpoint. Text fields are sent with
    no filename so the body is multipart even when there is no image.
    """
    form: UploadForm = []
    if asset is not None:
        form.append(("file", (asset.filename, asset.content, asset.content_type)))

    fields = {
        "name": request.name,
        "symbol": request.symbol,
        "description": metadata.description,
        "twitter": metadata.twitter,
        "telegram": metadata.telegram,
        "website": metadata.website,
        "showName": "true",
    }
    form.extend((key, (None, value, None)) for key, value in fields.items())
    return form
