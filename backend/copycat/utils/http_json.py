import json
from typing import Any

import httpx


def _reject_constant(name: str):
    raise ValueError(f"Non-finite JSON number: {name}")


def safe_json(response: httpx.Response, default: Any = None) -> Any:
    """
    Parse a response body as strict JSON, returning ``default`` when it is not.
    NaN, Infinity and -Infinity count as invalid JSON.
    """
    try:
        return json.loads(response.content, parse_constant=_reject_constant)
    except ValueError:
        return default
