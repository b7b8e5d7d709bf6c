"""
Frame preview compositor for Frame Studio.

Paints one framed-photo preview onto a caller-owned RenderSurface:

1. clear the surface
2. fit the outer frame rectangle to 80% of the limiting canvas dimension
3. paint the frame band (shadow, texture or flat tint, material overlay)
4. inset by the frame thickness to get the inner rectangle
5. fill the mat border, if enabled
6. inset by the border width to get the photo rectangle
7. draw the photo clipped to that rectangle, cover-scaled

Nothing is raised from a render. Failures are logged and reported in the
returned RenderResult; the surface keeps whatever was painted before the
failing step.
"""

import asyncio
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple
from PIL import Image, ImageColor
from loguru import logger

from .errors import FrameStudioError, InvalidGeometryError, PhotoLoadError, TextureLoadError
from .geometry import (
    Rect, cover_placement, effective_frame_ratio, frame_rect,
    inches_to_display_px, needs_rotation, visible_source_box,
)
from .models import FrameSpec, PhotoAsset, RenderSurface
from .photos import load_photo_image
from .textures import (
    TextureLibrary, add_metal_sheen, add_wood_grain, drop_shadow,
    flat_fill, is_white, multiply_tint, tile_pattern,
)


STATUS_OK = "ok"
STATUS_FAILED = "failed"
STATUS_SUPERSEDED = "superseded"


class CompositorSettings:
    """Settings for preview rendering."""

    def __init__(self,
                 fill_ratio: float = 0.8,
                 px_per_inch: float = 20.0,
                 texture_dir: str = "assets/textures",
                 texture_seed: int = 1337):
        self.fill_ratio = fill_ratio
        self.px_per_inch = px_per_inch
        self.texture_dir = texture_dir
        self.texture_seed = texture_seed

    @classmethod
    def from_config(cls, config) -> "CompositorSettings":
        return cls(
            fill_ratio=config.FRAME_FILL_RATIO,
            px_per_inch=config.PX_PER_INCH_DISPLAY,
            texture_dir=config.TEXTURE_DIR,
            texture_seed=config.TEXTURE_SEED,
        )


@dataclass
class RenderResult:
    """Outcome of one render call."""
    status: str
    generation: int
    outer_rect: Optional[Rect] = None
    inner_rect: Optional[Rect] = None
    photo_rect: Optional[Rect] = None
    draw_rect: Optional[Rect] = None
    error: Optional[FrameStudioError] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> dict:
        rects = {
            name: rect.as_dict() if rect else None
            for name, rect in (
                ('outer_rect', self.outer_rect),
                ('inner_rect', self.inner_rect),
                ('photo_rect', self.photo_rect),
                ('draw_rect', self.draw_rect),
            )
        }
        return {
            'status': self.status,
            'generation': self.generation,
            **rects,
            'error': self.error.to_dict() if self.error else None,
            'warnings': list(self.warnings),
        }


class PreviewCompositor:
    """Renders frame previews. Stateless between calls apart from the texture cache."""

    def __init__(self,
                 settings: CompositorSettings = None,
                 textures: TextureLibrary = None,
                 photo_loader: Callable[[PhotoAsset], Image.Image] = load_photo_image):
        self.settings = settings or CompositorSettings()
        self.textures = textures or TextureLibrary(Path(self.settings.texture_dir))
        self.photo_loader = photo_loader

    def render(self, surface: RenderSurface, photo: PhotoAsset, frame_spec: FrameSpec) -> RenderResult:
        """Render the full preview synchronously."""
        result = self._paint_frame(surface, photo, frame_spec, surface.next_generation())
        if not result.ok:
            return result

        try:
            image = self.photo_loader(photo)
        except PhotoLoadError as e:
            return self._photo_failed(result, e)

        self._paint_photo(surface, image, frame_spec, result)
        return result

    async def render_async(self, surface: RenderSurface, photo: PhotoAsset,
                           frame_spec: FrameSpec) -> RenderResult:
        """
        Render with the photo decode off the event loop.

        The frame band is painted before the first suspension. If another
        render starts on the same surface while the photo decodes, this one
        is superseded and leaves the surface alone. Renders on other
        surfaces do not interfere.
        """
        generation = surface.next_generation()
        result = self._paint_frame(surface, photo, frame_spec, generation)
        if not result.ok:
            return result

        try:
            image = await asyncio.to_thread(self.photo_loader, photo)
        except PhotoLoadError as e:
            if generation != surface.generation:
                return self._superseded(result)
            return self._photo_failed(result, e)

        if generation != surface.generation:
            return self._superseded(result)

        self._paint_photo(surface, image, frame_spec, result)
        return result

    def _paint_frame(self, surface: RenderSurface, photo: PhotoAsset,
                     spec: FrameSpec, generation: int) -> RenderResult:
        result = RenderResult(status=STATUS_OK, generation=generation)
        surface.clear()

        size = spec.size
        if size.width <= 0 or size.height <= 0:
            return self._geometry_failed(result, InvalidGeometryError("frame size", size.width, size.height))

        ratio = effective_frame_ratio(size, spec.orientation, photo)
        outer = frame_rect(surface.width, surface.height, ratio, self.settings.fill_ratio)
        result.outer_rect = outer
        self._paint_band(surface, outer, spec, result)

        thickness_px = inches_to_display_px(spec.thickness.inches, self.settings.px_per_inch)
        inner = outer.inset(thickness_px)
        result.inner_rect = inner
        if not self._has_area(inner):
            return self._geometry_failed(result, InvalidGeometryError("inner", inner.width, inner.height))

        border_px = 0.0
        if spec.border.enabled:
            surface.image.paste(ImageColor.getrgb(spec.border.color) + (255,), inner.to_box())
            border_px = inches_to_display_px(spec.border.width, self.settings.px_per_inch)

        photo_rect = inner.inset(border_px)
        result.photo_rect = photo_rect
        if not self._has_area(photo_rect):
            return self._geometry_failed(result, InvalidGeometryError("photo", photo_rect.width, photo_rect.height))

        logger.debug(f"Render #{generation} on {surface}: outer={outer}, inner={inner}, photo={photo_rect}")
        return result

    def _paint_band(self, surface: RenderSurface, outer: Rect, spec: FrameSpec, result: RenderResult):
        box = outer.to_box()
        band_size = (box[2] - box[0], box[3] - box[1])
        if band_size[0] <= 0 or band_size[1] <= 0:
            return

        surface.image.alpha_composite(drop_shadow(surface.size, box))
        fill = self._band_fill(spec, band_size, (box[0], box[1]), result.warnings)
        surface.image.alpha_composite(fill, dest=(box[0], box[1]))

    def _band_fill(self, spec: FrameSpec, size: Tuple[int, int], origin: Tuple[int, int],
                   warnings: List[str]) -> Image.Image:
        material = spec.material
        if not material.texture:
            return flat_fill(size, spec.color.hex)

        try:
            texture = self.textures.load(material.texture)
        except TextureLoadError as e:
            logger.warning(f"{e.message}; falling back to flat {spec.color.hex} fill")
            warnings.append(e.message)
            return flat_fill(size, spec.color.hex)

        fill = tile_pattern(texture, size, origin)
        if not is_white(spec.color.hex):
            fill = multiply_tint(fill, spec.color.hex)

        if material.category == "wood":
            fill = add_wood_grain(fill, random.Random(self.settings.texture_seed))
        else:
            fill = add_metal_sheen(fill)
        return fill

    def _paint_photo(self, surface: RenderSurface, image: Image.Image,
                     spec: FrameSpec, result: RenderResult):
        area = result.photo_rect
        rotated = needs_rotation(spec.orientation, image.width, image.height)
        draw = cover_placement(
            image.width, image.height, area,
            zoom=spec.zoom, offset_x=spec.offset_x, offset_y=spec.offset_y,
            rotated=rotated,
        )
        result.draw_rect = draw

        if rotated:
            image = image.transpose(Image.Transpose.ROTATE_270)

        # only the visible part is resampled; the buffer is at most the opening
        left, top, right, bottom = area.to_box()
        visible = visible_source_box(image.width, image.height, draw, (left, top, right, bottom))
        if visible is None:
            return
        dest, source = visible

        scaled = image.resize(
            (dest[2] - dest[0], dest[3] - dest[1]),
            Image.Resampling.LANCZOS,
            box=source,
        )
        surface.image.alpha_composite(scaled, dest=(dest[0], dest[1]))

        logger.debug(f"Render #{result.generation}: photo {image.size} drawn at {draw}, visible {dest}")

    @staticmethod
    def _has_area(rect: Rect) -> bool:
        if rect.is_degenerate:
            return False
        left, top, right, bottom = rect.to_box()
        return right > left and bottom > top

    @staticmethod
    def _geometry_failed(result: RenderResult, error: InvalidGeometryError) -> RenderResult:
        if result.outer_rect is None:
            logger.warning(f"Render #{result.generation} painted nothing: {error.message}")
        else:
            logger.warning(f"Render #{result.generation} painted the frame but not the photo: {error.message}")
        result.status = STATUS_FAILED
        result.error = error
        return result

    @staticmethod
    def _photo_failed(result: RenderResult, error: PhotoLoadError) -> RenderResult:
        logger.warning(f"Render #{result.generation}: {error.message} ({error.details.get('reason')})")
        result.status = STATUS_FAILED
        result.error = error
        return result

    @staticmethod
    def _superseded(result: RenderResult) -> RenderResult:
        logger.info(f"Render #{result.generation} superseded before its photo was ready")
        result.status = STATUS_SUPERSEDED
        return result
