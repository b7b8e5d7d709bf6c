"""
Preview geometry for Frame Studio.

This module handles:
- Fitting the frame's outer rectangle into the canvas
- Insetting the frame band and mat border
- Cover scaling of the photo into its opening (zoom, pan, rotation)

All values are float pixels; rounding happens only when pixels are written.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .models import FrameSize, PhotoAsset


DEFAULT_FILL_RATIO = 0.8
DEFAULT_PX_PER_INCH = 20.0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle on the render surface."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, amount: float) -> "Rect":
        """Shrink by `amount` on all four sides."""
        return Rect(
            self.x + amount,
            self.y + amount,
            self.width - amount * 2,
            self.height - amount * 2,
        )

    def to_box(self) -> Tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) box for PIL."""
        return (round(self.x), round(self.y), round(self.right), round(self.bottom))

    def as_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}


def inches_to_display_px(inches: float, px_per_inch: float = DEFAULT_PX_PER_INCH) -> float:
    """Display heuristic: a fixed pixels-per-inch, independent of canvas DPI."""
    return inches * px_per_inch


def effective_frame_ratio(size: FrameSize, orientation: str = "fixed",
                          photo: Optional[PhotoAsset] = None) -> float:
    """
    Width/height ratio the frame is drawn at.

    'fixed' keeps the size as listed, 'landscape' and 'portrait' force the
    long edge horizontal or vertical, 'auto' follows the photo (a square
    photo leaves the size unchanged).
    """
    ratio = size.width / size.height
    wide = max(ratio, 1 / ratio)
    tall = min(ratio, 1 / ratio)

    if orientation == "landscape":
        return wide
    if orientation == "portrait":
        return tall
    if orientation == "auto" and photo is not None:
        if photo.orientation == "landscape":
            return wide
        if photo.orientation == "portrait":
            return tall
    return ratio


def frame_rect(surface_width: float, surface_height: float, ratio: float,
               fill_ratio: float = DEFAULT_FILL_RATIO) -> Rect:
    """
    Outer frame rectangle, centered, fitted to `fill_ratio` of the limiting
    canvas dimension.

    A frame relatively wider than the canvas is width-limited, otherwise
    height-limited. On equal ratios both branches give the same rectangle.
    """
    canvas_ratio = surface_width / surface_height

    if ratio > canvas_ratio:
        width = surface_width * fill_ratio
        height = width / ratio
    else:
        height = surface_height * fill_ratio
        width = height * ratio

    return Rect((surface_width - width) / 2, (surface_height - height) / 2, width, height)


def needs_rotation(orientation: str, image_width: int, image_height: int) -> bool:
    """True when an explicit orientation disagrees with the decoded photo."""
    photo_orientation = "landscape" if image_width / image_height > 1 else "portrait"
    return (
        (orientation == "landscape" and photo_orientation == "portrait")
        or (orientation == "portrait" and photo_orientation == "landscape")
    )


def cover_placement(image_width: int, image_height: int, area: Rect,
                    zoom: float = 1.0, offset_x: float = 0.0, offset_y: float = 0.0,
                    rotated: bool = False) -> Rect:
    """
    Where to draw the photo so it covers `area` completely.

    A photo relatively wider than the area is scaled to the area height and
    cropped left/right; otherwise it is scaled to the area width and cropped
    top/bottom. Zoom scales the result; offsets pan by a percentage of the
    overflow on each axis. With `rotated` the photo is laid out turned a
    quarter turn, so its width and height trade places.
    """
    photo_ratio = image_width / image_height
    if rotated:
        photo_ratio = 1 / photo_ratio
    area_ratio = area.width / area.height

    if photo_ratio > area_ratio:
        base_height = area.height
        base_width = base_height * photo_ratio
    else:
        base_width = area.width
        base_height = base_width / photo_ratio

    draw_width = base_width * zoom
    draw_height = base_height * zoom

    max_offset_x = max(0.0, (draw_width - area.width) / 2)
    max_offset_y = max(0.0, (draw_height - area.height) / 2)
    shift_x = (offset_x / 100) * max_offset_x
    shift_y = (offset_y / 100) * max_offset_y

    return Rect(
        area.x + (area.width - draw_width) / 2 + shift_x,
        area.y + (area.height - draw_height) / 2 + shift_y,
        draw_width,
        draw_height,
    )


def visible_source_box(image_width: int, image_height: int, draw: Rect,
                       clip_box: Tuple[int, int, int, int]
                       ) -> Optional[Tuple[Tuple[int, int, int, int], Tuple[float, float, float, float]]]:
    """
    Part of a photo drawn at `draw` that shows through `clip_box`.

    Returns the destination pixel box on the canvas and the matching source
    box in image coordinates, or None when nothing is visible.
    """
    left, top, right, bottom = clip_box
    x0 = max(left, round(draw.x))
    y0 = max(top, round(draw.y))
    x1 = min(right, round(draw.right))
    y1 = min(bottom, round(draw.bottom))
    if x1 <= x0 or y1 <= y0:
        return None

    scale_x = image_width / draw.width
    scale_y = image_height / draw.height
    source = (
        max(0.0, (x0 - draw.x) * scale_x),
        max(0.0, (y0 - draw.y) * scale_y),
        min(float(image_width), (x1 - draw.x) * scale_x),
        min(float(image_height), (y1 - draw.y) * scale_y),
    )
    return (x0, y0, x1, y1), source
