"""
Frame catalog: the sizes, materials, thicknesses and mat options the
customizer offers, loaded from config/catalog.yaml.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from loguru import logger

from .config import load_yaml_config
from .errors import UnknownCatalogItemError, ValidationError
from .models import (
    BorderOption, FrameColor, FrameMaterial, FrameSize, FrameSpec,
    FrameThickness, PhotoAsset,
)


CUSTOM_SIZE_ID = "custom"
DEFAULT_THICKNESS_NAME = '1/2"'
RATIO_TOLERANCE = 0.5


class BorderColorOption(BaseModel):
    name: str
    hex: str


class FrameCatalog:
    """All purchasable frame options"""

    def __init__(self,
                 sizes: List[FrameSize],
                 materials: List[FrameMaterial],
                 thicknesses: List[FrameThickness],
                 border_widths: List[float] = None,
                 border_colors: List[BorderColorOption] = None):
        self.sizes = sizes
        self.materials = materials
        self.thicknesses = thicknesses
        self.border_widths = border_widths or []
        self.border_colors = border_colors or []

    def size(self, size_id: str) -> FrameSize:
        return self._find("size", self.sizes, size_id)

    def material(self, material_id: str) -> FrameMaterial:
        return self._find("material", self.materials, material_id)

    def color(self, material_id: str, color_id: str) -> FrameColor:
        material = self.material(material_id)
        return self._find(f"{material.name} color", list(material.colors), color_id)

    def thickness(self, thickness_id: str) -> FrameThickness:
        return self._find("thickness", self.thicknesses, thickness_id)

    @staticmethod
    def _find(kind: str, items: list, item_id: str):
        for item in items:
            if item.id == item_id:
                return item
        raise UnknownCatalogItemError(kind, item_id, [item.id for item in items])

    def available_sizes(self, photo: Optional[PhotoAsset] = None) -> List[FrameSize]:
        """Sizes whose proportions are close to the photo's, either way round"""
        if photo is None:
            return list(self.sizes)

        available = []
        for size in self.sizes:
            if size.id == CUSTOM_SIZE_ID or size.width <= 0 or size.height <= 0:
                available.append(size)
                continue
            ratio = size.ratio
            if (abs(photo.aspect_ratio - ratio) < RATIO_TOLERANCE
                    or abs(photo.aspect_ratio - 1 / ratio) < RATIO_TOLERANCE):
                available.append(size)
        return available

    def default_spec(self) -> FrameSpec:
        if not (self.sizes and self.materials and self.thicknesses):
            raise ValidationError("Catalog is missing sizes, materials or thicknesses")

        size = next((s for s in self.sizes if s.popular), self.sizes[0])
        material = next((m for m in self.materials if m.colors), None)
        if material is None:
            raise ValidationError("Catalog has no material with colors")
        thickness = next(
            (t for t in self.thicknesses if t.name == DEFAULT_THICKNESS_NAME),
            self.thicknesses[0],
        )

        return FrameSpec(
            size=size,
            material=material,
            color=material.colors[0],
            thickness=thickness,
            border=BorderOption(enabled=False),
        )

    def build_spec(self, payload: Dict[str, Any]) -> FrameSpec:
        """
        Build a FrameSpec from option ids, as posted by the customizer:

            {"size": "8x10", "material": "oak", "color": "natural-oak",
             "thickness": "half", "border": {"enabled": true, "width": 1,
             "color": "#FFFFFF"}, "zoom": 1.0, "orientation": "fixed",
             "offset_x": 0, "offset_y": 0}

        A "custom" size takes its inches from custom_width/custom_height.
        Missing ids fall back to the catalog default.
        """
        default = self.default_spec()

        size = self.size(payload["size"]) if payload.get("size") else default.size
        if size.id == CUSTOM_SIZE_ID:
            size = self._custom_size(payload)

        material = self.material(payload["material"]) if payload.get("material") else default.material
        if payload.get("color"):
            color = self.color(material.id, payload["color"])
        elif material.colors:
            color = material.colors[0]
        else:
            raise ValidationError(f"Material {material.id} has no colors")

        thickness = self.thickness(payload["thickness"]) if payload.get("thickness") else default.thickness

        try:
            return FrameSpec(
                size=size,
                material=material,
                color=color,
                thickness=thickness,
                border=BorderOption(**(payload.get("border") or {})),
                zoom=payload.get("zoom", 1.0),
                orientation=payload.get("orientation", "fixed"),
                offset_x=payload.get("offset_x", 0.0),
                offset_y=payload.get("offset_y", 0.0),
            )
        except Exception as e:
            raise ValidationError(f"Invalid frame configuration: {e}", details={'payload': payload})

    def _custom_size(self, payload: Dict[str, Any]) -> FrameSize:
        try:
            width = float(payload.get("custom_width", 0))
            height = float(payload.get("custom_height", 0))
        except (TypeError, ValueError):
            width = height = 0.0
        if width <= 0 or height <= 0:
            raise ValidationError(
                "Custom size needs a positive width and height",
                details={'custom_width': payload.get("custom_width"),
                         'custom_height': payload.get("custom_height")},
                suggestions=["Enter the width and height in inches"]
            )
        label = f'{width:g}" × {height:g}"'
        return FrameSize(id=CUSTOM_SIZE_ID, name=label, width=width, height=height, display_name=label)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sizes': [s.model_dump() for s in self.sizes],
            'materials': [m.model_dump() for m in self.materials],
            'thicknesses': [t.model_dump() for t in self.thicknesses],
            'border_widths': list(self.border_widths),
            'border_colors': [c.model_dump() for c in self.border_colors],
        }


def load_catalog(path: str = "config/catalog.yaml") -> FrameCatalog:
    """Load the frame catalog from YAML; invalid entries are skipped"""
    data = load_yaml_config(path)

    def parse(model, items, kind):
        parsed = []
        for item in items or []:
            try:
                parsed.append(model(**item))
            except Exception as e:
                logger.error(f"Error loading {kind} {item.get('id', item.get('name', 'unknown'))}: {e}")
        return parsed

    catalog = FrameCatalog(
        sizes=parse(FrameSize, data.get("sizes"), "size"),
        materials=parse(FrameMaterial, data.get("materials"), "material"),
        thicknesses=parse(FrameThickness, data.get("thicknesses"), "thickness"),
        border_widths=[float(w) for w in data.get("border_widths", [])],
        border_colors=parse(BorderColorOption, data.get("border_colors"), "border color"),
    )
    logger.info(f"Loaded catalog: {len(catalog.sizes)} sizes, {len(catalog.materials)} materials, "
                f"{len(catalog.thicknesses)} thicknesses")
    return catalog
