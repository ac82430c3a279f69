"""Rendering backends - rasterize a visual tree into image bytes."""

import asyncio
import os
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from io import BytesIO

import httpx
from PIL import Image, ImageChops, ImageDraw, ImageFont, ImageOps

from ghcard.config import CardConfig
from ghcard.exceptions import RenderError
from ghcard.logging import get_logger
from ghcard.render.tree import Node, NodeKind


ImageLoader = Callable[[str], Awaitable[bytes]]

FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
]
BOLD_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
]
PLACEHOLDER_COLOR = "#cbd5e1"


class RenderBackend(ABC):
    """Abstract base class for rasterizers."""

    media_type: str = "image/png"

    @abstractmethod
    async def render(self, tree: Node) -> bytes:
        """
        Rasterize a visual tree.

        Args:
            tree: Root node; its width and height give the image size

        Returns:
            Encoded image bytes

        Raises:
            RenderError: If the tree cannot be drawn or encoded
        """
        ...

    async def close(self) -> None:
        """Cleanup connections and resources."""

    async def __aenter__(self) -> "RenderBackend":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class PillowBackend(RenderBackend):
    """
    Draws the tree with Pillow and encodes it as PNG.

    Remote images (avatar, QR code) are fetched through ``image_loader``
    before painting. A failed load draws a placeholder instead of failing
    the whole image.
    """

    def __init__(
        self,
        config: CardConfig | None = None,
        image_loader: ImageLoader | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or CardConfig()
        self._client = client
        self._owns_client = False
        self._image_loader = image_loader or self._http_loader
        self._fonts: dict[tuple[int, bool], ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}
        self._emoji_fonts: dict[int, ImageFont.FreeTypeFont | None] = {}
        self._log = get_logger("renderer")

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _http_loader(self, src: str) -> bytes:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.request_timeout_s,
                headers={"User-Agent": self.config.user_agent},
                follow_redirects=True,
            )
            self._owns_client = True
        response = await self._client.get(src)
        response.raise_for_status()
        return response.content

    async def _load_image(self, src: str) -> Image.Image | None:
        try:
            data = await self._image_loader(src)
            img = Image.open(BytesIO(data))
            img.load()
            return img.convert("RGBA")
        except (httpx.HTTPError, OSError, ValueError) as e:
            self._log.warning("image_load_failed", src=src, error=str(e))
            return None

    async def render(self, tree: Node) -> bytes:
        sources = sorted({
            node.src for node in tree.walk()
            if node.kind == NodeKind.IMAGE and node.src
        })
        images = {}
        for src in sources:
            images[src] = await self._load_image(src)

        # Pillow work is CPU bound, keep it off the event loop
        try:
            return await asyncio.to_thread(self.paint, tree, images)
        except (OSError, ValueError, TypeError) as e:
            raise RenderError(f"Failed to rasterize card: {e}") from e

    def paint(self, tree: Node, images: dict[str, Image.Image | None] | None = None) -> bytes:
        """Draw the tree synchronously with already loaded images."""
        images = images or {}
        canvas = Image.new("RGBA", (tree.width, tree.height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(canvas)

        for node in tree.walk():
            if node.kind == NodeKind.BOX:
                self._draw_box(draw, node)
            elif node.kind == NodeKind.TEXT:
                self._draw_text(draw, node)
            elif node.kind == NodeKind.IMAGE:
                self._draw_image(canvas, draw, node, images.get(node.src))

        buffer = BytesIO()
        canvas.convert("RGB").save(buffer, format="PNG")
        return buffer.getvalue()

    # Fonts

    def _font(self, size: int, bold: bool = False):
        key = (size, bold)
        if key in self._fonts:
            return self._fonts[key]

        configured = self.config.bold_font_path if bold else self.config.font_path
        candidates = [configured] if configured else []
        if bold:
            candidates += BOLD_FONT_PATHS
        candidates += FONT_PATHS

        font = None
        for path in candidates:
            if path and os.path.exists(path):
                try:
                    font = ImageFont.truetype(path, size)
                    break
                except OSError:
                    continue
        if font is None:
            font = ImageFont.load_default(size=size)

        self._fonts[key] = font
        return font

    def _emoji_font(self, size: int):
        if size in self._emoji_fonts:
            return self._emoji_fonts[size]

        font = None
        if self.config.emoji_font_path:
            try:
                font = ImageFont.truetype(self.config.emoji_font_path, size)
            except OSError as e:
                self._log.warning("emoji_font_failed", path=self.config.emoji_font_path, error=str(e))
        self._emoji_fonts[size] = font
        return font

    # Primitives

    def _draw_box(self, draw: ImageDraw.ImageDraw, node: Node) -> None:
        style = node.style
        if style.background is None and not (style.border_color and style.border_width):
            return

        rect = [node.x, node.y, node.x + node.width - 1, node.y + node.height - 1]
        outline = style.border_color if style.border_width else None
        if style.radius:
            draw.rounded_rectangle(
                rect,
                radius=style.radius,
                fill=style.background,
                outline=outline,
                width=style.border_width,
                corners=style.rounded_corners,
            )
        else:
            draw.rectangle(rect, fill=style.background, outline=outline, width=style.border_width)

    def _draw_text(self, draw: ImageDraw.ImageDraw, node: Node) -> None:
        style = node.style
        size = style.font_size or 16
        font = self._font(size, style.bold)
        cursor = node.x
        y = node.y + (node.height - size) // 2

        for run in node.runs:
            fill = run.color or style.color or "#000000"
            if run.emoji:
                emoji_font = self._emoji_font(size)
                if emoji_font is None:
                    continue
                draw.text((cursor, y), run.text, font=emoji_font, fill=fill, embedded_color=True)
                cursor += int(draw.textlength(run.text, font=emoji_font))
                continue
            draw.text((cursor, y), run.text, font=font, fill=fill)
            cursor += int(draw.textlength(run.text, font=font))

    def _mask(self, node: Node) -> Image.Image | None:
        radius = node.style.radius
        if not radius:
            return None
        mask = Image.new("L", (node.width, node.height), 0)
        mask_draw = ImageDraw.Draw(mask)
        if radius * 2 >= min(node.width, node.height):
            mask_draw.ellipse([0, 0, node.width - 1, node.height - 1], fill=255)
        else:
            mask_draw.rounded_rectangle([0, 0, node.width - 1, node.height - 1], radius=radius, fill=255)
        return mask

    def _draw_image(self, canvas: Image.Image, draw: ImageDraw.ImageDraw,
                    node: Node, img: Image.Image | None) -> None:
        mask = self._mask(node)
        if img is None:
            rect = [node.x, node.y, node.x + node.width - 1, node.y + node.height - 1]
            if mask is not None and node.style.radius * 2 >= min(node.width, node.height):
                draw.ellipse(rect, fill=PLACEHOLDER_COLOR)
            else:
                draw.rectangle(rect, fill=PLACEHOLDER_COLOR)
            return

        fitted = ImageOps.fit(img, (node.width, node.height), method=Image.Resampling.LANCZOS)
        alpha = fitted.getchannel("A")
        if mask is not None:
            alpha = ImageChops.multiply(alpha, mask)
        canvas.paste(fitted, (node.x, node.y), alpha)
