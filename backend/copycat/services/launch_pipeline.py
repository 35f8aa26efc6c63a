import logging
from typing import Optional

import httpx

from copycat.config import settings
from copycat.schemas.launch import LaunchRequest, LaunchResult
from copycat.services.asset_relocator import AssetRelocator, build_upload_form
from copycat.services.ipfs_service import IPFSService
from copycat.services.metadata_resolver import MetadataResolver
from copycat.services.trade_service import TradeService

logger = logging.getLogger(__name__)


class LaunchPipeline:
    """
    Copies an existing token into a fresh pump.fun launch:
    1. Resolve the source metadata (best-effort)
    2. Download the image (best-effort)
    3. Re-upload image + fields to pump.fun IPFS
    4. Submit the create trade to PumpPortal
    Stages run one after the other; the first LaunchError stops the run.
    """

    def __init__(
        self,
        metadata_resolver: Optional[MetadataResolver] = None,
        asset_relocator: Optional[AssetRelocator] = None,
        ipfs: Optional[IPFSService] = None,
        trade: Optional[TradeService] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.metadata_resolver = metadata_resolver or MetadataResolver()
        self.asset_relocator = asset_relocator or AssetRelocator()
        self.ipfs = ipfs or IPFSService()
        self.trade = trade or TradeService()
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    async def run(self, request: LaunchRequest) -> LaunchResult:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            logger.info(f"[{request.symbol}] Resolving source metadata from {request.uri}")
            metadata = await self.metadata_resolver.resolve(client, request)

            asset = await self.asset_relocator.fetch_asset(client, metadata.image_url)
            form = build_upload_form(request, metadata, asset)

            logger.info(f"[{request.symbol}] Uploading metadata to IPFS (image attached: {asset is not None})")
            pinned = await self.ipfs.upload_metadata(client, form)

            logger.info(f"[{request.symbol}] Submitting create trade")
            return await self.trade.create_token(client, request, pinned.metadataUri)


# Singleton instance
launch_pipeline = LaunchPipeline()
