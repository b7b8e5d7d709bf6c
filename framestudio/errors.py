"""
Error types for the Frame Studio preview service.

Every failure carries a message, structured details and recovery
suggestions so the API can hand something useful back to the customizer.
"""

from typing import Dict, List, Any


class FrameStudioError(Exception):
    """Base exception for all Frame Studio errors."""

    def __init__(self, message: str, details: Dict[str, Any] = None, suggestions: List[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'details': self.details,
            'suggestions': self.suggestions
        }


class ValidationError(FrameStudioError):
    """Raised when user input validation fails."""
    pass


class ConfigurationError(FrameStudioError):
    """Raised when configuration is invalid or missing."""
    pass


class ProcessingError(FrameStudioError):
    """Raised when a processing step fails."""
    pass


class RenderError(ProcessingError):
    """Raised when preview rendering fails."""
    pass


class AssetError(RenderError):
    """Raised when an image the preview depends on cannot be used."""
    pass


class PhotoLoadError(AssetError):
    """Raised when the customer photo cannot be decoded."""

    def __init__(self, source: str, reason: str = None):
        super().__init__(
            f"Could not load photo: {source}",
            details={
                'source': source,
                'reason': reason
            },
            suggestions=[
                "Upload the photo again",
                "Use a JPG, PNG or WEBP image",
                "Make sure the file is not corrupted"
            ]
        )


class TextureLoadError(AssetError):
    """Raised when a frame material texture is missing or unreadable."""

    def __init__(self, texture: str, expected_path: str, reason: str = None):
        super().__init__(
            f"Frame texture not available: {texture}",
            details={
                'texture': texture,
                'expected_path': expected_path,
                'reason': reason
            },
            suggestions=[
                f"Ensure the texture exists at: {expected_path}",
                "Check TEXTURE_DIR in settings.yaml",
                "The preview falls back to a flat color until the texture is fixed"
            ]
        )


class InvalidGeometryError(RenderError):
    """Raised when frame thickness and border leave no room for the photo."""

    def __init__(self, region: str, width: float, height: float):
        super().__init__(
            f"Degenerate {region} rectangle: {width:.1f}x{height:.1f}px",
            details={
                'region': region,
                'width': width,
                'height': height
            },
            suggestions=[
                "Choose a thinner frame",
                "Reduce the mat border width",
                "Pick a larger frame size"
            ]
        )


class InvalidImageFormatError(ValidationError):
    """Raised when an uploaded photo is not a supported image."""

    def __init__(self, filename: str, detected_type: str = None):
        super().__init__(
            f"Invalid image format: {filename}",
            details={
                'filename': filename,
                'detected_type': detected_type
            },
            suggestions=[
                "Use JPG, PNG or WEBP images",
                "Convert the file to a supported format",
                "Ensure the file is not corrupted"
            ]
        )


class FileTooLargeError(ValidationError):
    """Raised when an uploaded file exceeds the size limit."""

    def __init__(self, filename: str, size_mb: float, limit_mb: float):
        super().__init__(
            f"File too large: {filename} ({size_mb:.1f}MB exceeds {limit_mb:.1f}MB limit)",
            details={
                'filename': filename,
                'size_mb': size_mb,
                'limit_mb': limit_mb
            },
            suggestions=[
                f"Reduce file size to under {limit_mb:.1f}MB",
                "Export the photo at a lower resolution"
            ]
        )


class UnknownCatalogItemError(ValidationError):
    """Raised when a frame option id is not in the catalog."""

    def __init__(self, kind: str, item_id: str, available: List[str] = None):
        super().__init__(
            f"Unknown {kind}: {item_id}",
            details={
                'kind': kind,
                'item_id': item_id,
                'available': available or []
            },
            suggestions=[
                f"Pick one of the listed {kind} options",
                "Reload the catalog; it may have changed"
            ]
        )


def create_error_recovery_suggestions(error: Exception, context: Dict[str, Any] = None) -> List[str]:
    """Generate contextual recovery suggestions for any error."""
    suggestions = []

    if isinstance(error, FrameStudioError):
        suggestions.extend(error.suggestions)

    if context:
        if context.get('texture_failures', 0) > 0:
            suggestions.append("Check that frame texture assets are available")

        if context.get('has_photo') is False:
            suggestions.append("Upload a photo before requesting a preview")

    if not suggestions:
        suggestions = [
            "Try the preview again",
            "Try a different photo or frame option",
            "Contact support if the problem persists"
        ]

    return suggestions
