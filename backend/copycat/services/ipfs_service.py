import logging
from typing import Any, List, Optional, Tuple

import httpx

from copycat.config import settings
from copycat.errors import PinningError
from copycat.schemas.launch import PinningResult
from copycat.utils.http_json import safe_json

logger = logging.getLogger(__name__)

IPFS_SCHEME = "ipfs://"

# Multipart parts in the shape httpx expects for ``files=``
UploadForm = List[Tuple[str, Tuple[Optional[str], Any, Optional[str]]]]


def resolve_ipfs(uri: Optional[str], gateway_url: Optional[str] = None) -> str:
    """Turn ``ipfs://<cid>`` into a gateway URL; anything else passes through"""
    if not uri:
        return ""
    if uri.startswith(IPFS_SCHEME):
        gateway = gateway_url or settings.IPFS_GATEWAY_URL
        if not gateway.endswith("/"):
            gateway += "/"
        return gateway + uri[len(IPFS_SCHEME):]
    return uri


class IPFSService:
    """Client for the pump.fun metadata pinning endpoint"""

    def __init__(self, endpoint: Optional[str] = None):
        self.endpoint = endpoint or settings.PUMP_IPFS_ENDPOINT

    async def upload_metadata(self, client: httpx.AsyncClient, form: UploadForm) -> PinningResult:
        """
        POST the multipart form (image + token fields) and return the pinned metadata URI.
        Raises PinningError on transport failure, non-2xx status, or a response
        without ``metadataUri``.
        """
        try:
            response = await client.post(self.endpoint, files=form)
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach IPFS upload endpoint: {e}")
            raise PinningError(details=str(e)) from e

        if not response.is_success:
            error_text = self._safe_text(response)
            logger.error(f"IPFS upload error: {response.status_code} - {error_text}")
            raise PinningError(details=error_text)

        result = safe_json(response, default={})

        metadata_uri = result.get("metadataUri") if isinstance(result, dict) else None
        if not metadata_uri:
            logger.error(f"IPFS upload response has no metadataUri: {result}")
            raise PinningError("Missing metadataUri from IPFS upload", raw=result)

        logger.info(f"✅ Metadata pinned to IPFS: {metadata_uri}")
        return PinningResult(metadataUri=str(metadata_uri))

    @staticmethod
    def _safe_text(response: httpx.Response) -> str:
        try:
            return response.text
        except Exception:
            return ""
