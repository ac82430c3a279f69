"""Pipeline orchestrator - coordinates fetching, layout and rasterizing."""

from datetime import datetime

import httpx

from ghcard.config import CardConfig
from ghcard.core.fetcher import build_client, fetch_activity_page, fetch_profile
from ghcard.core.transformer import extract_weekly_activity
from ghcard.exceptions import (
    FetchError,
    MissingUsernameError,
    RenderError,
    UserNotFoundError,
)
from ghcard.logging import configure_logging, get_logger
from ghcard.models.result import ImageResult
from ghcard.models.theme import Theme
from ghcard.render.backend import PillowBackend, RenderBackend
from ghcard.render.layout import build_error_card, build_profile_card
from ghcard.render.tree import Node


MISSING_USERNAME_MESSAGE = "No username provided."
NOT_FOUND_MESSAGE = "No GitHub user with username “{username}”."
UPSTREAM_ERROR_MESSAGE = "An error occurred when fetching information about the user."
RENDER_ERROR_MESSAGE = "An error occurred when rendering the card."


class CardGenerator:
    """
    High-level card generator.

    Example:
        async with CardGenerator() as generator:
            result = await generator.generate("octocat", dark=True)
            Path("octocat.png").write_bytes(result.content)
    """

    def __init__(
        self,
        config: CardConfig | None = None,
        backend: RenderBackend | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize generator with optional configuration.

        Args:
            config: CardConfig instance, uses defaults if None
            backend: Rasterizer, defaults to a PillowBackend sharing the HTTP client
            transport: Custom httpx transport for upstream requests
        """
        self.config = config or CardConfig()
        self._backend = backend
        self._owns_backend = backend is None
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._log = get_logger("generator")

    async def __aenter__(self) -> "CardGenerator":
        """Async context manager entry - initialize resources."""
        configure_logging(self.config)

        options = {"transport": self._transport} if self._transport else {}
        self._client = build_client(self.config, **options)

        if self._backend is None:
            self._backend = PillowBackend(self.config, client=self._client)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup resources."""
        if self._backend is not None and self._owns_backend:
            await self._backend.close()
            self._backend = None
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("CardGenerator must be used as an async context manager")
        return self._client

    async def build_tree(self, username: str | None, dark: bool = False) -> Node:
        """
        Fetch everything for a user and lay out the card.

        Raises:
            MissingUsernameError: If username is empty
            UserNotFoundError: If the account does not exist
            UpstreamError: If either upstream fetch fails
        """
        username = (username or "").strip().lstrip("@")
        if not username:
            raise MissingUsernameError("No username provided")

        profile = await fetch_profile(self.client, username, self.config)
        html = await fetch_activity_page(self.client, username, self.config)
        activity = extract_weekly_activity(html)

        self._log.debug(
            "activity_extracted",
            username=username,
            weeks=len(activity.weeks),
            days=len(activity.flatten()),
        )
        return build_profile_card(profile, activity, Theme.from_flag(dark), self.config)

    async def generate(self, username: str | None, dark: bool = False) -> ImageResult:
        """
        Render the card for a user, or an error card on failure.

        Args:
            username: GitHub login (leading ``@`` is ignored)
            dark: Use the dark theme

        Returns:
            ImageResult; always carries an image
        """
        start = datetime.now()
        self._log.info("card_start", username=username, dark=dark)

        try:
            tree = await self.build_tree(username, dark)
        except MissingUsernameError:
            self._log.info("missing_username")
            return await self.render_error(MISSING_USERNAME_MESSAGE, username, start)
        except UserNotFoundError:
            self._log.info("user_not_found", username=username)
            return await self.render_error(
                NOT_FOUND_MESSAGE.format(username=username),
                username,
                start,
            )
        except FetchError as e:
            self._log.error("upstream_error", username=username, error=str(e))
            return await self.render_error(UPSTREAM_ERROR_MESSAGE, username, start)

        try:
            content = await self._backend.render(tree)
        except RenderError as e:
            self._log.error("render_failed", username=username, error=str(e))
            return await self.render_error(RENDER_ERROR_MESSAGE, username, start)

        duration_ms = (datetime.now() - start).total_seconds() * 1000
        self._log.info("card_complete", username=username, duration_ms=duration_ms)

        return ImageResult(
            success=True,
            content=content,
            media_type=self._backend.media_type,
            width=tree.width,
            height=tree.height,
            headers={"cache-control": f"public, max-age={self.config.cache_max_age}"},
            username=username,
            duration_ms=duration_ms,
        )

    async def render_error(
        self,
        message: str,
        username: str | None = None,
        start: datetime | None = None,
    ) -> ImageResult:
        """Render an error card; no cache header is set."""
        start = start or datetime.now()
        tree = build_error_card(message)
        content = await self._backend.render(tree)
        return ImageResult(
            success=False,
            content=content,
            media_type=self._backend.media_type,
            width=tree.width,
            height=tree.height,
            username=username,
            error_message=message,
            duration_ms=(datetime.now() - start).total_seconds() * 1000,
        )
