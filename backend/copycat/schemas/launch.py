# copycat/schemas/launch.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional

from copycat.errors import LaunchValidationError


# ============================================
# PURCHASE DEFAULTS
# ============================================

LAUNCH_DEFAULTS: Dict[str, Any] = {
    "devBuy": 1,
    "slippage": 10,
    "priorityFee": 0.0005,
    "pool": "pump",
}

REQUIRED_FIELDS = ("name", "symbol", "uri")


# ============================================
# INBOUND REQUEST
# ============================================

class LaunchRequest(BaseModel):
    """Body of POST /launch. Purchase fields stay loosely typed until the trade is built."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Token name")
    symbol: str = Field(default="", description="Token symbol/ticker")
    uri: str = Field(default="", description="Source metadata location (http(s):// or ipfs://)")
    devBuy: Any = Field(default=LAUNCH_DEFAULTS["devBuy"], description="Initial dev buy in SOL")
    slippage: Any = Field(default=LAUNCH_DEFAULTS["slippage"], description="Slippage percent")
    priorityFee: Any = Field(default=LAUNCH_DEFAULTS["priorityFee"], description="Priority fee in SOL")
    pool: Any = Field(default=LAUNCH_DEFAULTS["pool"], description="Target pool")
    image: Optional[str] = Field(default=None, description="Explicit image location, used when the metadata has none")

    @field_validator("name", "symbol", "uri", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("image", mode="before")
    @classmethod
    def coerce_image(cls, v):
        if v is None:
            return None
        return str(v).strip() or None


def parse_launch_request(body: Any) -> LaunchRequest:
    """Apply defaults and reject requests missing name, symbol or uri"""
    if not isinstance(body, dict):
        body = {}

    request = LaunchRequest.model_validate(body)
    if not all(getattr(request, field) for field in REQUIRED_FIELDS):
        raise LaunchValidationError()
    return request


# ============================================
# PIPELINE STAGE RESULTS
# ============================================

class ResolvedMetadata(BaseModel):
    description: str = ""
    twitter: str = ""
    telegram: str = ""
    website: str = ""
    image_url: str = ""
    source_found: bool = Field(default=False, description="Whether the source metadata document was retrieved")


class UploadedAsset(BaseModel):
    content: bytes
    content_type: str = "image/png"
    filename: str = "image.png"


class PinningResult(BaseModel):
    metadataUri: str


# ============================================
# TRADE API SCHEMAS
# ============================================

class TokenMetadataPayload(BaseModel):
    name: str
    symbol: str
    uri: str


class TradeInstruction(BaseModel):
    action: str = "create"
    tokenMetadata: TokenMetadataPayload
    denominatedInSol: bool = True
    amount: float
    slippage: float
    priorityFee: float
    pool: str = LAUNCH_DEFAULTS["pool"]


class LaunchResult(BaseModel):
    ok: bool = True
    signature: Optional[str] = None
    tradeResponse: Any = None
    metadataUri: str
