"""httpx-based fetchers for GitHub profile data and profile pages."""

from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ghcard.config import CardConfig
from ghcard.core.transformer import transform_profile
from ghcard.exceptions import UpstreamError, UserNotFoundError
from ghcard.logging import get_logger
from ghcard.models.profile import ProfileRecord


_log = get_logger("fetcher")


def build_client(config: CardConfig, **kwargs) -> httpx.AsyncClient:
    """
    Create the shared async client for one generator context.

    Args:
        config: CardConfig with timeout and user agent
        **kwargs: Extra httpx.AsyncClient options (e.g. ``transport`` in tests)

    Returns:
        Configured httpx.AsyncClient
    """
    return httpx.AsyncClient(
        timeout=config.request_timeout_s,
        headers={"User-Agent": config.user_agent},
        follow_redirects=True,
        **kwargs,
    )


def _auth_headers(config: CardConfig) -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if config.github_token:
        headers["Authorization"] = f"Bearer {config.github_token}"
    return headers


def _log_upstream_message(response: httpx.Response, username: str) -> None:
    """Log the upstream error message if the body carries one."""
    try:
        message = response.json().get("message")
    except (ValueError, AttributeError):
        return
    _log.warning(
        "upstream_message",
        username=username,
        status=response.status_code,
        message=message,
    )


async def fetch_profile(
    client: httpx.AsyncClient,
    username: str,
    config: CardConfig,
) -> ProfileRecord:
    """
    Fetch a user's public profile from the GitHub REST API.

    Args:
        client: Shared httpx.AsyncClient
        username: GitHub login
        config: CardConfig with API base URL and token

    Returns:
        Normalized ProfileRecord

    Raises:
        UserNotFoundError: If the API reports no such account
        UpstreamError: On any other non-200 status, transport failure or bad body
    """
    url = f"{config.api_base_url.rstrip('/')}/users/{quote(username, safe='')}"

    try:
        response = await client.get(url, headers=_auth_headers(config))
    except httpx.HTTPError as e:
        raise UpstreamError(f"Profile request failed: {e}") from e

    if response.status_code == 404:
        raise UserNotFoundError(f"No GitHub user {username}")
    if response.status_code != 200:
        _log_upstream_message(response, username)
        raise UpstreamError(
            f"Profile request returned HTTP {response.status_code}",
            status=response.status_code,
        )

    try:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("profile body is not an object")
        return transform_profile(data)
    except (ValueError, ValidationError) as e:
        raise UpstreamError(f"Malformed profile body: {e}", status=200) from e


async def fetch_activity_page(
    client: httpx.AsyncClient,
    username: str,
    config: CardConfig,
) -> str:
    """
    Fetch the public profile page that embeds the contribution calendar.

    Args:
        client: Shared httpx.AsyncClient
        username: GitHub login
        config: CardConfig with web base URL

    Returns:
        Raw HTML text

    Raises:
        UpstreamError: On a non-200 status or transport failure
    """
    url = f"{config.web_base_url.rstrip('/')}/{quote(username, safe='')}"

    try:
        response = await client.get(url, headers={"Accept": "text/html"})
    except httpx.HTTPError as e:
        raise UpstreamError(f"Profile page request failed: {e}") from e

    if response.status_code != 200:
        raise UpstreamError(
            f"Profile page returned HTTP {response.status_code}",
            status=response.status_code,
        )
    return response.text
