"""
Unit tests for the error handling system.

Tests custom exception classes, structured details, suggestions
and recovery helpers.
"""

import pytest
from framestudio.errors import (
    FrameStudioError, ValidationError, ProcessingError, RenderError, AssetError,
    PhotoLoadError, TextureLoadError, InvalidGeometryError,
    InvalidImageFormatError, FileTooLargeError, UnknownCatalogItemError,
    create_error_recovery_suggestions
)


class TestFrameStudioError:
    """Test the base FrameStudioError class."""

    def test_basic_error_creation(self):
        error = FrameStudioError("Test error message")

        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.details == {}
        assert error.suggestions == []

    def test_error_to_dict(self):
        """Test converting error to dictionary."""
        error = FrameStudioError("Test", details={'key': 'value'}, suggestions=['suggestion'])

        result = error.to_dict()

        assert result['error_type'] == 'FrameStudioError'
        assert result['message'] == 'Test'
        assert result['details'] == {'key': 'value'}
        assert result['suggestions'] == ['suggestion']


class TestSpecificErrorTypes:
    """Test specific error type implementations."""

    def test_photo_load_error(self):
        error = PhotoLoadError('holiday.jpg', 'truncated file')

        assert "Could not load photo" in str(error)
        assert error.details == {'source': 'holiday.jpg', 'reason': 'truncated file'}
        assert isinstance(error, AssetError)
        assert isinstance(error, RenderError)

    def test_texture_load_error(self):
        error = TextureLoadError('oak.png', '/assets/textures/oak.png', 'file not found')

        assert "Frame texture not available: oak.png" == str(error)
        assert error.details['expected_path'] == '/assets/textures/oak.png'
        assert any('/assets/textures/oak.png' in s for s in error.suggestions)

    def test_invalid_geometry_error(self):
        error = InvalidGeometryError('photo', 0, 12.5)

        assert "Degenerate photo rectangle: 0.0x12.5px" == str(error)
        assert error.details['region'] == 'photo'
        assert any("thinner" in s.lower() for s in error.suggestions)
        assert isinstance(error, ProcessingError)

    def test_invalid_image_format_error(self):
        error = InvalidImageFormatError('test.txt', '.txt')

        assert "Invalid image format" in str(error)
        assert error.details['filename'] == 'test.txt'
        assert error.details['detected_type'] == '.txt'
        assert isinstance(error, ValidationError)

    def test_file_too_large_error(self):
        error = FileTooLargeError('huge_file.jpg', 25.5, 20.0)

        assert "File too large" in str(error)
        assert "25.5MB" in str(error)
        assert "20.0MB" in str(error)
        assert error.details['size_mb'] == 25.5
        assert error.details['limit_mb'] == 20.0

    def test_unknown_catalog_item_error(self):
        error = UnknownCatalogItemError('material', 'bamboo', ['oak', 'walnut'])

        assert str(error) == "Unknown material: bamboo"
        assert error.details['available'] == ['oak', 'walnut']
        assert isinstance(error, ValidationError)


class TestRecoverySuggestions:

    def test_suggestions_from_error(self):
        error = InvalidGeometryError('inner', -4, 10)
        suggestions = create_error_recovery_suggestions(error)

        assert suggestions[:3] == error.suggestions

    def test_suggestions_with_context(self):
        error = ProcessingError("Test error")
        suggestions = create_error_recovery_suggestions(error, {'texture_failures': 2, 'has_photo': False})

        assert any("texture" in s.lower() for s in suggestions)
        assert any("upload a photo" in s.lower() for s in suggestions)

    @pytest.mark.parametrize("error", [ValueError("boom"), ProcessingError("bare")])
    def test_generic_fallback(self, error):
        suggestions = create_error_recovery_suggestions(error)

        assert len(suggestions) == 3
        assert "Try the preview again" in suggestions
