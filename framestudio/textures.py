"""
Frame band materials for Frame Studio.

This module handles:
- Loading and caching material texture images
- Tiling textures across the frame band
- Multiply tinting with the chosen frame color
- Decorative wood grain and brushed metal overlays
- The soft drop shadow behind the frame
"""

import random
from pathlib import Path
from typing import Dict, Tuple
import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFilter
from loguru import logger

from .errors import TextureLoadError


WOOD_GRAIN_COLOR = (139, 69, 19)
WOOD_GRAIN_ALPHA = 0.5 * 0.3  # stroke alpha x layer alpha
WOOD_GRAIN_SPACING = 3
WOOD_GRAIN_JITTER = 2.0

METAL_SHEEN_ALPHA = 0.2
METAL_SHEEN_STOPS = (
    (0.0, (255, 255, 255, 0.5)),
    (0.5, (0, 0, 0, 0.2)),
    (1.0, (255, 255, 255, 0.5)),
)

SHADOW_ALPHA = 0.3
SHADOW_BLUR = 15
SHADOW_OFFSET = (5, 5)


def is_white(hex_color: str) -> bool:
    return hex_color.upper() == "#FFFFFF"


def flat_fill(size: Tuple[int, int], hex_color: str) -> Image.Image:
    return Image.new('RGBA', size, ImageColor.getrgb(hex_color) + (255,))


def tile_pattern(texture: Image.Image, size: Tuple[int, int],
                 origin: Tuple[int, int] = (0, 0)) -> Image.Image:
    """
    Repeat `texture` over a region of `size` whose top-left corner sits at
    `origin` on the canvas. Tiles are anchored to the canvas origin so the
    pattern does not shift when the frame moves. No seam blending.
    """
    width, height = size
    tile_w, tile_h = texture.size
    pattern = Image.new('RGBA', size, (0, 0, 0, 0))

    start_x = -(origin[0] % tile_w)
    start_y = -(origin[1] % tile_h)
    for y in range(start_y, height, tile_h):
        for x in range(start_x, width, tile_w):
            pattern.paste(texture, (x, y))

    return pattern


def multiply_tint(region: Image.Image, hex_color: str) -> Image.Image:
    """Multiply blend - darkens the texture toward the tint color."""
    tint = np.array(ImageColor.getrgb(hex_color), dtype=np.float32) / 255.0

    arr = np.array(region.convert('RGBA'), dtype=np.float32)
    arr[..., :3] = arr[..., :3] * tint
    arr = np.clip(np.rint(arr), 0, 255).astype(np.uint8)

    return Image.fromarray(arr, 'RGBA')


def add_wood_grain(region: Image.Image, rng: random.Random) -> Image.Image:
    """Faint vertical streaks every few pixels, each slightly slanted."""
    width, height = region.size
    overlay = Image.new('RGBA', region.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    stroke = WOOD_GRAIN_COLOR + (round(255 * WOOD_GRAIN_ALPHA),)

    for x in range(0, width, WOOD_GRAIN_SPACING):
        end_x = x + round(rng.random() * WOOD_GRAIN_JITTER)
        draw.line([(x, 0), (end_x, height)], fill=stroke, width=1)

    return Image.alpha_composite(region.convert('RGBA'), overlay)


def _sheen_row(width: int) -> np.ndarray:
    t = (np.arange(width, dtype=np.float32) + 0.5) / max(width, 1)
    row = np.zeros((width, 4), dtype=np.float32)

    for (t0, c0), (t1, c1) in zip(METAL_SHEEN_STOPS, METAL_SHEEN_STOPS[1:]):
        mask = (t >= t0) & (t <= t1)
        u = ((t[mask] - t0) / (t1 - t0))[:, None]
        start = np.array(c0, dtype=np.float32)
        end = np.array(c1, dtype=np.float32)
        row[mask] = start + (end - start) * u

    row[:, 3] *= METAL_SHEEN_ALPHA
    row[:, 3] *= 255
    return row


def add_metal_sheen(region: Image.Image) -> Image.Image:
    """Brushed metal: light edges, darker middle, across the width."""
    width, height = region.size
    row = _sheen_row(width)
    sheen = np.clip(np.rint(np.repeat(row[None, :, :], height, axis=0)), 0, 255).astype(np.uint8)

    overlay = Image.fromarray(sheen, 'RGBA')
    return Image.alpha_composite(region.convert('RGBA'), overlay)


def drop_shadow(canvas_size: Tuple[int, int], box: Tuple[int, int, int, int]) -> Image.Image:
    """Blurred shadow layer for a rectangle, offset down-right."""
    layer = Image.new('RGBA', canvas_size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    dx, dy = SHADOW_OFFSET
    left, top, right, bottom = box
    draw.rectangle(
        [left + dx, top + dy, right + dx - 1, bottom + dy - 1],
        fill=(0, 0, 0, round(255 * SHADOW_ALPHA)),
    )
    # canvas shadowBlur is roughly twice the gaussian sigma
    return layer.filter(ImageFilter.GaussianBlur(SHADOW_BLUR / 2))


class TextureLibrary:
    """Loads material textures from disk and keeps them cached."""

    def __init__(self, texture_dir: Path):
        self.texture_dir = Path(texture_dir)
        self._cache: Dict[str, Image.Image] = {}

        logger.info(f"Texture library initialized with textures from: {self.texture_dir}")

    def resolve(self, texture: str) -> Path:
        path = Path(texture)
        if path.is_absolute():
            return path
        return self.texture_dir / path

    def load(self, texture: str) -> Image.Image:
        if texture in self._cache:
            return self._cache[texture]

        path = self.resolve(texture)
        if not path.exists():
            raise TextureLoadError(texture, str(path), "file not found")

        try:
            with Image.open(path) as img:
                image = img.convert('RGBA')
        except Exception as e:
            raise TextureLoadError(texture, str(path), str(e))

        if image.width == 0 or image.height == 0:
            raise TextureLoadError(texture, str(path), "empty image")

        self._cache[texture] = image
        logger.debug(f"Loaded texture: {path} ({image.size})")
        return image
