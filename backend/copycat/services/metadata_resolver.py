import logging
from typing import Any, Dict, Optional

import httpx

from copycat.config import settings
from copycat.schemas.launch import LaunchRequest, ResolvedMetadata
from copycat.services.ipfs_service import resolve_ipfs
from copycat.utils.http_json import safe_json

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}

SOCIAL_KEYS = ("twitter", "telegram", "website")


def _text(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


def _social_link(meta: Dict[str, Any], key: str) -> str:
    # Top-level key wins over the nested "extensions" object
    value = meta.get(key)
    if not value:
        extensions = meta.get("extensions")
        if isinstance(extensions, dict):
            value = extensions.get(key)
    return _text(value)


def extract_metadata(
    meta: Optional[Dict[str, Any]],
    fallback_image: Optional[str] = None,
    gateway_url: Optional[str] = None,
) -> ResolvedMetadata:
    """
    Pull description, socials and image out of a loosely shaped metadata document.
    Missing keys become empty strings; ``meta=None`` means the source was unreachable.
      - description: ``description``, then ``desc``
      - twitter/telegram/website: top-level key, then ``extensions.<key>``
      - image: ``image`` in the document, then the request's explicit image
    """
    source = meta if isinstance(meta, dict) else {}

    image = _text(source.get("image")) or _text(fallback_image)

    return ResolvedMetadata(
        description=_text(source.get("description") or source.get("desc")),
        image_url=resolve_ipfs(image, gateway_url),
        source_found=isinstance(meta, dict),
        **{key: _social_link(source, key) for key in SOCIAL_KEYS},
    )


class MetadataResolver:
    """Fetches the source token metadata; never raises"""

    def __init__(self, gateway_url: Optional[str] = None):
        self.gateway_url = gateway_url or settings.IPFS_GATEWAY_URL

    async def fetch_metadata(self, client: httpx.AsyncClient, uri: str) -> Optional[Dict[str, Any]]:
        url = resolve_ipfs(uri, self.gateway_url)
        if not url:
            return None
        try:
            response = await client.get(url, headers=NO_CACHE_HEADERS)
            if not response.is_success:
                logger.warning(f"Source metadata fetch returned {response.status_code} for {url}")
                return None
            data = safe_json(response)
        except Exception as e:
            logger.warning(f"Could not load source metadata from {url}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Source metadata at {url} is not a JSON object")
            return None
        return data

    async def resolve(self, client: httpx.AsyncClient, request: LaunchRequest) -> ResolvedMetadata:
        meta = await self.fetch_metadata(client, request.uri)
        resolved = extract_metadata(meta, fallback_image=request.image, gateway_url=self.gateway_url)
        logger.info(
            f"Resolved metadata for {request.symbol}: source_found={resolved.source_found}, "
            f"image={'yes' if resolved.image_url else 'no'}"
        )
        return resolved
