"""
Flask routes for Frame Studio
Catalog, pricing, photo intake and live preview endpoints
"""

import json
from flask import Blueprint, Response, current_app, jsonify, request
from loguru import logger

from .catalog import FrameCatalog
from .compositor import PreviewCompositor
from .errors import FrameStudioError, ValidationError, create_error_recovery_suggestions
from .models import PhotoAsset, RenderSurface
from .photos import validate_upload
from .pricing import calculate_frame_price, format_price, photo_specs


MAX_PREVIEW_DIMENSION = 2000

bp = Blueprint('main', __name__)


def get_catalog() -> FrameCatalog:
    return current_app.extensions['frame_catalog']


def get_compositor() -> PreviewCompositor:
    return current_app.extensions['preview_compositor']


@bp.errorhandler(FrameStudioError)
def handle_frame_studio_error(e: FrameStudioError):
    context = None
    if request.endpoint == 'main.preview':
        context = {'has_photo': 'photo' in request.files}

    body = e.to_dict()
    body['suggestions'] = create_error_recovery_suggestions(e, context)

    if isinstance(e, ValidationError):
        logger.warning(f"Validation error on {request.path}: {e}")
        return jsonify(body), 400

    logger.error(f"Processing error on {request.path}: {e}")
    return jsonify(body), 500


@bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})


@bp.route('/api/catalog', methods=['GET'])
def catalog():
    """Every frame option, plus the configuration the customizer starts from"""
    frame_catalog = get_catalog()
    return jsonify({
        **frame_catalog.to_dict(),
        'default': frame_catalog.default_spec().model_dump(),
        'preview_debounce_ms': current_app.config.get('PREVIEW_DEBOUNCE_MS', 150),
    })


@bp.route('/api/price', methods=['POST'])
def price():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object with the frame configuration")

    spec = get_catalog().build_spec(payload)
    amount = calculate_frame_price(spec)
    return jsonify({'price': amount, 'formatted': format_price(amount)})


@bp.route('/api/photos', methods=['POST'])
def photos():
    """Inspect an uploaded photo and list the sizes that suit it"""
    photo = read_uploaded_photo()
    return jsonify({
        'filename': photo.filename,
        'width': photo.width,
        'height': photo.height,
        'orientation': photo.orientation,
        'aspect_ratio': photo.aspect_ratio,
        'specs': photo_specs(photo),
        'available_sizes': [size.id for size in get_catalog().available_sizes(photo)],
    })


@bp.route('/api/preview', methods=['POST'])
def preview():
    """Render the framed preview as PNG"""
    photo = read_uploaded_photo()

    try:
        payload = json.loads(request.form.get('config') or '{}')
    except json.JSONDecodeError as e:
        raise ValidationError(f"Frame configuration is not valid JSON: {e}")
    if not isinstance(payload, dict):
        raise ValidationError("Frame configuration must be a JSON object")

    spec = get_catalog().build_spec(payload)
    width = read_dimension('width', current_app.config.get('PREVIEW_CANVAS_WIDTH', 400))
    height = read_dimension('height', current_app.config.get('PREVIEW_CANVAS_HEIGHT', 400))

    surface = RenderSurface(width, height)
    result = get_compositor().render(surface, photo, spec)
    if not result.ok:
        logger.warning(f"Preview for {photo.label} rendered with status {result.status}")

    response = Response(surface.to_png(), mimetype='image/png')
    response.headers['X-Render-Status'] = result.status
    if result.warnings:
        response.headers['X-Render-Warnings'] = '; '.join(result.warnings)
    if result.error:
        response.headers['X-Render-Error'] = result.error.message
    return response


def read_uploaded_photo() -> PhotoAsset:
    if 'photo' not in request.files:
        raise ValidationError("No photo uploaded", suggestions=["Attach the photo as the 'photo' field"])

    upload = request.files['photo']
    if upload.filename == '':
        raise ValidationError("No photo selected")

    return validate_upload(
        upload.filename,
        upload.read(),
        current_app.config.get('MAX_UPLOAD_SIZE', 20 * 1024 * 1024),
        current_app.config.get('ALLOWED_EXTENSIONS', [".jpg", ".jpeg", ".png"]),
    )


def read_dimension(name: str, default: int) -> int:
    raw = request.form.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"Preview {name} must be an integer, got {raw!r}")
    if not 1 <= value <= MAX_PREVIEW_DIMENSION:
        raise ValidationError(f"Preview {name} must be between 1 and {MAX_PREVIEW_DIMENSION}")
    return value
