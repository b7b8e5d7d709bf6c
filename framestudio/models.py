"""
Domain models for the frame preview.

Photo and frame options are frozen pydantic models: they are built by the
upload and customization flows and passed by value into the compositor.
RenderSurface is the mutable canvas the caller owns.
"""

import io
from pathlib import Path
from typing import Literal, Optional, Tuple, Union
from PIL import Image, ImageOps
from pydantic import BaseModel, ConfigDict, Field
from loguru import logger

from .errors import InvalidImageFormatError


HEX_COLOR = r'^#[0-9A-Fa-f]{6}$'

Orientation = Literal["fixed", "auto", "landscape", "portrait"]


class PhotoAsset(BaseModel):
    """A customer photo: where to read it from and its pixel dimensions"""
    model_config = ConfigDict(frozen=True)

    source: Union[str, bytes]
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    filename: Optional[str] = None

    @property
    def orientation(self) -> str:
        if self.height > self.width:
            return "portrait"
        if self.width > self.height:
            return "landscape"
        return "square"

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def label(self) -> str:
        if self.filename:
            return self.filename
        if isinstance(self.source, bytes):
            return f"<{len(self.source)} bytes>"
        return self.source

    @classmethod
    def from_bytes(cls, data: bytes, filename: str = None) -> "PhotoAsset":
        """Read dimensions from an uploaded image (EXIF rotation applied)"""
        try:
            with Image.open(io.BytesIO(data)) as img:
                width, height = ImageOps.exif_transpose(img).size
        except Exception as e:
            logger.warning(f"Rejected upload {filename}: {e}")
            raise InvalidImageFormatError(filename or "<upload>", type(e).__name__)
        return cls(source=data, width=width, height=height, filename=filename)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PhotoAsset":
        path = Path(path)
        try:
            with Image.open(path) as img:
                width, height = ImageOps.exif_transpose(img).size
        except Exception as e:
            logger.warning(f"Rejected photo file {path}: {e}")
            raise InvalidImageFormatError(path.name, type(e).__name__)
        return cls(source=str(path), width=width, height=height, filename=path.name)


class FrameSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    width: float = Field(ge=0)  # inches
    height: float = Field(ge=0)
    display_name: str
    popular: bool = False

    @property
    def ratio(self) -> float:
        return self.width / self.height


class FrameColor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    hex: str = Field(pattern=HEX_COLOR)
    price_multiplier: float = 1.0


class FrameMaterial(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: Literal["wood", "metal"]
    texture: Optional[str] = None  # image file, absolute or relative to TEXTURE_DIR
    price_multiplier: float = 1.0
    colors: Tuple[FrameColor, ...] = ()


class FrameThickness(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    inches: float = Field(gt=0)
    price_multiplier: float = 1.0


class BorderOption(BaseModel):
    """Mat border between the frame band and the photo"""
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    width: float = Field(default=1.0, ge=0)  # inches
    color: str = Field(default="#FFFFFF", pattern=HEX_COLOR)


class FrameSpec(BaseModel):
    """Everything the compositor needs to know about the chosen frame"""
    model_config = ConfigDict(frozen=True)

    size: FrameSize
    material: FrameMaterial
    color: FrameColor
    thickness: FrameThickness
    border: BorderOption = BorderOption()

    zoom: float = Field(default=1.0, ge=0.5, le=2.0)
    orientation: Orientation = "fixed"
    offset_x: float = Field(default=0.0, ge=-100, le=100)  # percent of overflow
    offset_y: float = Field(default=0.0, ge=-100, le=100)


class RenderSurface:
    """
    Fixed-size RGBA canvas owned by the caller.

    `generation` counts the renders started on this surface; an async render
    only paints its photo if no later render has started here since.
    """

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Render surface must be at least 1x1, got {width}x{height}")
        self.image = Image.new('RGBA', (width, height), (0, 0, 0, 0))
        self.generation = 0

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def next_generation(self) -> int:
        self.generation += 1
        return self.generation

    def clear(self):
        self.image.paste((0, 0, 0, 0), (0, 0, self.width, self.height))

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format='PNG')
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"RenderSurface({self.width}x{self.height})"
