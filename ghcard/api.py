"""FastAPI web server for ghcard."""

from contextlib import asynccontextmanager
from datetime import datetime

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel

from ghcard import CardConfig, CardGenerator, __version__
from ghcard.core.orchestrator import UPSTREAM_ERROR_MESSAGE
from ghcard.logging import get_logger
from ghcard.render.backend import RenderBackend


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


_log = get_logger("api")


def create_app(
    config: CardConfig | None = None,
    backend: RenderBackend | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: CardConfig instance, uses defaults (and env vars) if None
        backend: Rasterizer override
        transport: Custom httpx transport for upstream requests

    Returns:
        FastAPI app with one CardGenerator for its lifetime
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage generator lifecycle."""
        generator = CardGenerator(config or CardConfig(), backend=backend, transport=transport)
        await generator.__aenter__()
        app.state.generator = generator
        yield
        await generator.__aexit__(None, None, None)

    app = FastAPI(
        title="ghcard API",
        description="Social preview images for GitHub profiles",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now().isoformat(),
        )

    @app.get(
        "/api/github",
        tags=["Cards"],
        response_class=Response,
        responses={200: {"content": {"image/png": {}}}},
    )
    async def github_card(
        request: Request,
        username: str | None = Query(None, description="GitHub username"),
    ):
        """
        Render the 1200x628 preview card for a GitHub user.

        ``dark`` is a presence flag: ``?username=octocat&dark`` selects the
        dark theme. Failures are rendered as an error card; the response is
        always an image. A leading ``@`` on the username is ignored for the
        lookup, but the not-found card quotes the value exactly as sent.
        """
        generator: CardGenerator = request.app.state.generator
        dark = "dark" in request.query_params

        try:
            result = await generator.generate(username, dark=dark)
        except Exception:
            _log.exception("card_failed", username=username)
            result = await generator.render_error(UPSTREAM_ERROR_MESSAGE, username)

        return Response(
            content=result.content,
            media_type=result.media_type,
            headers=result.headers,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
