"""Shared fixtures - upstream GitHub is mocked with httpx.MockTransport."""

import json
from pathlib import Path

import httpx
import pytest

from ghcard.core.transformer import transform_profile
from ghcard.models.profile import ProfileRecord
from ghcard.render.backend import RenderBackend
from ghcard.render.tree import Node


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture_text(name: str) -> str:
    """Load a text fixture by file name."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class RecordingBackend(RenderBackend):
    """Backend that keeps the trees it was asked to draw."""

    def __init__(self):
        self.trees: list[Node] = []
        self.closed = False

    async def render(self, tree: Node) -> bytes:
        self.trees.append(tree)
        return b"\x89PNG fake"

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def profile_data() -> dict:
    return json.loads(load_fixture_text("octocat.json"))


@pytest.fixture
def profile(profile_data) -> ProfileRecord:
    return transform_profile(profile_data)


@pytest.fixture
def calendar_html() -> str:
    return load_fixture_text("table_calendar.html")


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def github_transport(profile_data, calendar_html):
    """
    Factory for a MockTransport standing in for api.github.com and github.com.

    Every request is appended to ``transport.requests``.
    """

    def factory(
        profile_status: int = 200,
        profile_body=None,
        page_status: int = 200,
        page_html: str | None = None,
        page_error: Exception | None = None,
    ) -> httpx.MockTransport:
        body = profile_data if profile_body is None else profile_body
        html = calendar_html if page_html is None else page_html
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.host == "api.github.com":
                if isinstance(body, (dict, list)):
                    return httpx.Response(profile_status, json=body)
                return httpx.Response(profile_status, text=body)
            if request.url.host == "github.com":
                if page_error is not None:
                    raise page_error
                return httpx.Response(page_status, text=html)
            return httpx.Response(404)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return factory
