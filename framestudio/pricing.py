"""
Price arithmetic for a configured frame.
"""

import math
from loguru import logger

from .models import FrameSpec, PhotoAsset


BASE_PRICE = 25.99
SIZE_MULTIPLIERS = {
    "4x6": 1.0,
    "5x7": 1.2,
    "8x10": 1.5,
    "8x12": 1.7,
    "11x14": 2.0,
    "12x16": 2.3,
    "16x20": 2.8,
}
UNLISTED_SIZE_MULTIPLIER = 2.0
BORDER_PRICE_PER_INCH = 5.0


def calculate_frame_price(spec: FrameSpec) -> float:
    """Base price scaled by every option's multiplier, plus the mat border"""
    price = BASE_PRICE
    price *= SIZE_MULTIPLIERS.get(spec.size.id, UNLISTED_SIZE_MULTIPLIER)
    # an unset (zero) multiplier counts as 1.0
    price *= spec.material.price_multiplier or 1.0
    price *= spec.color.price_multiplier or 1.0
    price *= spec.thickness.price_multiplier or 1.0

    if spec.border.enabled:
        price += spec.border.width * BORDER_PRICE_PER_INCH

    if math.isnan(price) or price < 0:
        logger.error(f"Invalid price {price} for {spec.size.id}/{spec.material.id}, using base price")
        return BASE_PRICE

    # half-up to the cent
    return math.floor(price * 100 + 0.5) / 100


def format_price(price: float) -> str:
    return f"₹{price:.2f}"


def photo_specs(photo: PhotoAsset) -> str:
    return f"{photo.width} × {photo.height} px ({photo.orientation.capitalize()})"
