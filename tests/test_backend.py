"""Unit tests for the Pillow rasterizer - images are generated in memory, no internet."""

import asyncio
from io import BytesIO
from unittest.mock import patch

import httpx
import pytest
from PIL import Image

from ghcard.exceptions import RenderError
from ghcard.models.activity import WeeklyActivity
from ghcard.models.theme import Theme
from ghcard.render.backend import PLACEHOLDER_COLOR, PillowBackend, RenderBackend
from ghcard.render.layout import build_error_card, build_profile_card
from ghcard.render.theme import PALETTES
from ghcard.render.tree import Style, box, image


ACTIVITY = WeeklyActivity(weeks=[[0, 1, 2, 3, 4, 0, 1], [2, 3, 4]])


def png_bytes(color: str = "#ff0000", size: tuple[int, int] = (32, 32)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def hex_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def open_png(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img.convert("RGB")


class TestPillowBackend:
    """Test rasterizing visual trees."""

    def test_is_a_render_backend(self):
        assert isinstance(PillowBackend(), RenderBackend)
        assert PillowBackend.media_type == "image/png"

    @pytest.mark.asyncio
    async def test_error_card_is_png_of_fixed_size(self):
        data = await PillowBackend().render(build_error_card("No username provided."))
        assert data.startswith(b"\x89PNG")
        assert open_png(data).size == (1200, 628)

    @pytest.mark.asyncio
    async def test_error_card_colors(self):
        tree = build_error_card("No username provided.")
        header = tree.find("error-header")
        img = open_png(await PillowBackend().render(tree))

        assert img.getpixel((5, 5)) == (255, 255, 255)
        assert img.getpixel((header.x + header.width - 5, header.y + header.height // 2)) == hex_rgb("#dc2626")

    @pytest.mark.parametrize("theme", list(Theme))
    @pytest.mark.asyncio
    async def test_profile_card_backgrounds(self, profile, theme: Theme):
        loaded = []

        async def loader(src: str) -> bytes:
            loaded.append(src)
            return png_bytes("#123456")

        tree = build_profile_card(profile, ACTIVITY, theme)
        img = open_png(await PillowBackend(image_loader=loader).render(tree))
        palette = PALETTES[theme]

        assert img.size == (1200, 628)
        assert img.getpixel((5, 5)) == hex_rgb(palette.canvas)
        assert img.getpixel((40, 40)) == hex_rgb(palette.background)
        assert sorted(loaded) == sorted({profile.avatar_url, tree.find("qr").src})

    @pytest.mark.asyncio
    async def test_avatar_is_drawn_in_a_circle(self, profile):
        async def loader(src: str) -> bytes:
            return png_bytes("#123456", size=(256, 256))

        tree = build_profile_card(profile, ACTIVITY, Theme.LIGHT)
        avatar = tree.find("avatar")
        img = open_png(await PillowBackend(image_loader=loader).render(tree))

        center = (avatar.x + avatar.width // 2, avatar.y + avatar.height // 2)
        corner = (avatar.x + 2, avatar.y + 2)
        assert img.getpixel(center) == hex_rgb("#123456")
        assert img.getpixel(corner) == hex_rgb(PALETTES[Theme.LIGHT].background)

    @pytest.mark.asyncio
    async def test_activity_cells_are_painted(self, profile):
        async def loader(src: str) -> bytes:
            return png_bytes()

        tree = build_profile_card(profile, ACTIVITY, Theme.DARK)
        cell = tree.find("activity").children[0].children[4]
        img = open_png(await PillowBackend(image_loader=loader).render(tree))

        assert img.getpixel((cell.x + 4, cell.y + 4)) == hex_rgb(PALETTES[Theme.DARK].activity[4])

    @pytest.mark.asyncio
    async def test_failed_image_load_draws_placeholder(self, profile):
        async def loader(src: str) -> bytes:
            raise httpx.ConnectError("unreachable")

        tree = build_profile_card(profile, ACTIVITY, Theme.LIGHT)
        avatar = tree.find("avatar")
        img = open_png(await PillowBackend(image_loader=loader).render(tree))

        center = (avatar.x + avatar.width // 2, avatar.y + avatar.height // 2)
        assert img.getpixel(center) == hex_rgb(PLACEHOLDER_COLOR)

    @pytest.mark.asyncio
    async def test_undecodable_image_draws_placeholder(self):
        async def loader(src: str) -> bytes:
            return b"definitely not an image"

        tree = box(0, 0, 20, 20, style=Style(background="#ffffff"), children=[
            image(0, 0, 20, 20, src="https://example.com/broken.png"),
        ])
        img = open_png(await PillowBackend(image_loader=loader).render(tree))
        assert img.getpixel((10, 10)) == hex_rgb(PLACEHOLDER_COLOR)

    @pytest.mark.asyncio
    async def test_each_source_loaded_once(self):
        calls = []

        async def loader(src: str) -> bytes:
            calls.append(src)
            return png_bytes()

        tree = box(0, 0, 40, 20, children=[
            image(0, 0, 20, 20, src="https://example.com/a.png"),
            image(20, 0, 20, 20, src="https://example.com/a.png"),
        ])
        await PillowBackend(image_loader=loader).render(tree)
        assert calls == ["https://example.com/a.png"]

    @pytest.mark.asyncio
    async def test_default_loader_uses_http(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=png_bytes("#00ff00", size=(20, 20)))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            backend = PillowBackend(client=client)
            tree = box(0, 0, 20, 20, children=[image(0, 0, 20, 20, src="https://example.com/a.png")])
            img = open_png(await backend.render(tree))

        assert str(requests[0].url) == "https://example.com/a.png"
        assert img.getpixel((10, 10)) == (0, 255, 0)

    @pytest.mark.asyncio
    async def test_http_error_status_draws_placeholder(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            tree = box(0, 0, 20, 20, children=[image(0, 0, 20, 20, src="https://example.com/a.png")])
            img = open_png(await PillowBackend(client=client).render(tree))

        assert img.getpixel((10, 10)) == hex_rgb(PLACEHOLDER_COLOR)

    @pytest.mark.asyncio
    async def test_same_tree_same_bytes(self):
        tree = build_error_card("Deterministic")
        backend = PillowBackend()
        assert await backend.render(tree) == await backend.render(tree)

    @pytest.mark.asyncio
    async def test_context_manager_enters(self):
        async def noop(src: str) -> bytes:
            return png_bytes()

        async with PillowBackend(image_loader=noop) as backend:
            assert isinstance(backend, PillowBackend)

    @pytest.mark.asyncio
    async def test_paint_runs_in_worker_thread(self):
        tree = build_error_card("Threaded")
        backend = PillowBackend()

        with patch("ghcard.render.backend.asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            data = await backend.render(tree)

        to_thread.assert_called_once_with(backend.paint, tree, {})
        assert data.startswith(b"\x89PNG")

    @pytest.mark.asyncio
    async def test_event_loop_stays_responsive_while_painting(self, profile):
        async def loader(src: str) -> bytes:
            return png_bytes()

        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                ticks += 1
                await asyncio.sleep(0)

        backend = PillowBackend(image_loader=loader)
        tree = build_profile_card(profile, ACTIVITY, Theme.DARK)
        task = asyncio.create_task(ticker())
        await asyncio.sleep(0)
        before = ticks
        try:
            await backend.render(tree)
        finally:
            task.cancel()

        assert ticks > before + 1

    @pytest.mark.asyncio
    async def test_paint_failure_becomes_render_error(self):
        backend = PillowBackend()
        with patch.object(backend, "paint", side_effect=OSError("encoder missing")):
            with pytest.raises(RenderError, match="encoder missing"):
                await backend.render(build_error_card("x"))
