import os
import re

# No rotating log file while testing
os.environ["LOG_DIR"] = ""

import httpx
import pytest
from fastapi.testclient import TestClient

from copycat.main import app
from copycat.routers.launch import get_launch_pipeline
from copycat.services.ipfs_service import IPFSService
from copycat.services.launch_pipeline import LaunchPipeline
from copycat.services.metadata_resolver import MetadataResolver
from copycat.services.trade_service import TradeService

GATEWAY_URL = "https://ipfs.io/ipfs/"
IPFS_URL = "https://pump.test/api/ipfs"
TRADE_URL = "https://portal.test/api/trade"


class FakeUpstream:
    """Routes outbound httpx requests to canned responses and records every call"""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, url, status=200, json=None, content=None, headers=None, exc=None):
        self.routes[(method, url)] = dict(status=status, json=json, content=content, headers=headers, exc=exc)

    def handler(self, request):
        self.requests.append(request)
        route = self.routes.get((request.method, str(request.url).split("?")[0]))
        if route is None:
            raise httpx.ConnectError(f"no route for {request.method} {request.url}", request=request)
        if route["exc"] is not None:
            raise route["exc"](f"simulated failure for {request.url}", request=request)
        if route["json"] is not None:
            return httpx.Response(route["status"], json=route["json"], headers=route["headers"])
        return httpx.Response(route["status"], content=route["content"] or b"", headers=route["headers"])

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def calls_to(self, url):
        return [r for r in self.requests if str(r.url).split("?")[0] == url]


def parse_multipart(request):
    """name -> {"filename", "content_type", "data"} for a recorded multipart request"""
    boundary = request.headers["content-type"].split("boundary=")[1].encode()
    parts = {}
    for chunk in request.content.split(b"--" + boundary):
        chunk = chunk.strip(b"\r\n")
        if not chunk or chunk == b"--":
            continue
        head, _, data = chunk.partition(b"\r\n\r\n")
        head = head.decode()
        name = re.search(r'\bname="([^"]*)"', head).group(1)
        filename = re.search(r'filename="([^"]*)"', head)
        content_type = re.search(r"Content-Type: (.+)", head, re.IGNORECASE)
        parts[name] = {
            "filename": filename.group(1) if filename else None,
            "content_type": content_type.group(1).strip() if content_type else None,
            "data": data,
        }
    return parts


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def pipeline(upstream):
    return LaunchPipeline(
        metadata_resolver=MetadataResolver(gateway_url=GATEWAY_URL),
        ipfs=IPFSService(endpoint=IPFS_URL),
        trade=TradeService(endpoint=TRADE_URL, api_key=""),
        timeout=5.0,
        transport=upstream.transport,
    )


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_launch_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()
