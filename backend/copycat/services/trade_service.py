import logging
import math
from typing import Any, Optional
from urllib.parse import quote

import httpx

from copycat.config import settings
from copycat.errors import TradeError
from copycat.schemas.launch import (
    LAUNCH_DEFAULTS,
    LaunchRequest,
    LaunchResult,
    TokenMetadataPayload,
    TradeInstruction,
)
from copycat.utils.http_json import safe_json

logger = logging.getLogger(__name__)


def coerce_number(value: Any, default: float) -> float:
    """Float value of ``value``; ``default`` when it is missing or not a finite number"""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


class TradeService:
    """Client for the PumpPortal Lightning trade endpoint"""

    def __init__(self, endpoint: Optional[str] = None, api_key: Optional[str] = None):
        self.endpoint = endpoint or settings.PUMP_TRADE_ENDPOINT
        self.api_key = settings.PUMPPORTAL_API_KEY if api_key is None else api_key

    def trade_url(self) -> str:
        if not self.api_key:
            return self.endpoint
        separator = "&" if "?" in self.endpoint else "?"
        return f"{self.endpoint}{separator}api-key={quote(self.api_key, safe='')}"

    def build_instruction(self, request: LaunchRequest, metadata_uri: str) -> TradeInstruction:
        return TradeInstruction(
            tokenMetadata=TokenMetadataPayload(name=request.name, symbol=request.symbol, uri=metadata_uri),
            amount=coerce_number(request.devBuy, LAUNCH_DEFAULTS["devBuy"]),
            slippage=coerce_number(request.slippage, LAUNCH_DEFAULTS["slippage"]),
            priorityFee=coerce_number(request.priorityFee, LAUNCH_DEFAULTS["priorityFee"]),
            pool=str(request.pool or LAUNCH_DEFAULTS["pool"]),
        )

    async def create_token(self, client: httpx.AsyncClient, request: LaunchRequest, metadata_uri: str) -> LaunchResult:
        """
        Send the create + dev buy instruction. The HTTP status decides success;
        the body is relayed as parsed JSON, or None when it is not JSON.
        """
        instruction = self.build_instruction(request, metadata_uri)
        logger.info(
            f"Submitting create trade for {request.symbol}: amount={instruction.amount} SOL, "
            f"slippage={instruction.slippage}, priorityFee={instruction.priorityFee}, pool={instruction.pool}"
        )

        response = await client.post(
            self.trade_url(),
            json=instruction.model_dump(),
            headers={"Content-Type": "application/json"},
        )

        body = safe_json(response)

        if not response.is_success:
            logger.error(f"Trade failed for {request.symbol}: HTTP {response.status_code} - {body}")
            raise TradeError(response.status_code, body)

        signature = body.get("signature") if isinstance(body, dict) else None
        logger.info(f"🚀 Token {request.symbol} created, signature: {signature}")
        return LaunchResult(
            signature=str(signature) if signature else None,
            tradeResponse=body,
            metadataUri=metadata_uri,
        )
