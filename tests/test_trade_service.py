import httpx
import pytest

from copycat.errors import TradeError
from copycat.schemas.launch import LAUNCH_DEFAULTS, LaunchRequest
from copycat.services.trade_service import TradeService, coerce_number

from conftest import TRADE_URL

METADATA_URI = "https://ipfs.io/ipfs/QmNew"


@pytest.mark.parametrize(
    "value, expected",
    [
        (2, 2.0),
        ("0.25", 0.25),
        (0, 0.0),
        (None, 7.0),
        ("abc", 7.0),
        ("", 7.0),
        (True, 7.0),
        ([1], 7.0),
        ("nan", 7.0),
        (float("inf"), 7.0),
    ],
)
def test_coerce_number(value, expected):
    assert coerce_number(value, 7.0) == expected


def test_trade_url_without_api_key():
    assert TradeService(endpoint=TRADE_URL, api_key="").trade_url() == TRADE_URL


def test_trade_url_encodes_api_key():
    service = TradeService(endpoint=TRADE_URL, api_key="k y/+1")
    assert service.trade_url() == f"{TRADE_URL}?api-key=k%20y%2F%2B1"


def test_trade_url_appends_to_existing_query():
    service = TradeService(endpoint=f"{TRADE_URL}?cluster=main", api_key="key")
    assert service.trade_url() == f"{TRADE_URL}?cluster=main&api-key=key"


def test_build_instruction_applies_defaults():
    request = LaunchRequest(name="Foo", symbol="FOO", uri="https://example.com/m.json",
                            devBuy="lots", slippage=None, priorityFee="0.001", pool="")
    instruction = TradeService(endpoint=TRADE_URL, api_key="").build_instruction(request, METADATA_URI)

    assert instruction.model_dump() == {
        "action": "create",
        "tokenMetadata": {"name": "Foo", "symbol": "FOO", "uri": METADATA_URI},
        "denominatedInSol": True,
        "amount": 1.0,
        "slippage": 10.0,
        "priorityFee": 0.001,
        "pool": "pump",
    }


def test_build_instruction_reads_shared_defaults(monkeypatch):
    monkeypatch.setitem(LAUNCH_DEFAULTS, "slippage", 15)
    monkeypatch.setitem(LAUNCH_DEFAULTS, "pool", "raydium")
    request = LaunchRequest(name="Foo", symbol="FOO", uri="https://example.com/m.json", slippage="x", pool="")

    instruction = TradeService(endpoint=TRADE_URL, api_key="").build_instruction(request, METADATA_URI)

    assert (instruction.slippage, instruction.pool) == (15.0, "raydium")


async def _create(upstream, api_key=""):
    service = TradeService(endpoint=TRADE_URL, api_key=api_key)
    request = LaunchRequest(name="Foo", symbol="FOO", uri="https://example.com/m.json", devBuy=0.5)
    async with httpx.AsyncClient(transport=upstream.transport) as http:
        return await service.create_token(http, request, METADATA_URI)


@pytest.mark.anyio
async def test_create_token_returns_signature(upstream):
    upstream.add("POST", TRADE_URL, json={"signature": "5sig", "extra": 1})

    result = await _create(upstream, api_key="secret")

    assert result.ok is True
    assert result.signature == "5sig"
    assert result.tradeResponse == {"signature": "5sig", "extra": 1}
    assert result.metadataUri == METADATA_URI
    request = upstream.requests[0]
    assert request.url.params["api-key"] == "secret"
    assert request.headers["content-type"] == "application/json"


@pytest.mark.anyio
async def test_create_token_success_without_json_body(upstream):
    upstream.add("POST", TRADE_URL, content=b"ok")

    result = await _create(upstream)

    assert result.signature is None
    assert result.tradeResponse is None


@pytest.mark.anyio
async def test_create_token_success_with_non_finite_number(upstream):
    upstream.add("POST", TRADE_URL, content=b'{"signature": "5sig", "price": NaN}')

    result = await _create(upstream)

    assert result.signature is None
    assert result.tradeResponse is None


@pytest.mark.anyio
async def test_create_token_relays_upstream_error(upstream):
    upstream.add("POST", TRADE_URL, status=429, content=b"slow down")

    with pytest.raises(TradeError) as excinfo:
        await _create(upstream)

    assert excinfo.value.status_code == 429
    assert excinfo.value.to_payload() == {"error": "Trade failed", "response": None}


@pytest.mark.anyio
async def test_create_token_network_error_propagates(upstream):
    upstream.add("POST", TRADE_URL, exc=httpx.ConnectError)

    with pytest.raises(httpx.ConnectError):
        await _create(upstream)
