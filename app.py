import logging
import os
from typing import Any, Mapping, Optional, Union

from flask import Blueprint, Flask, abort, current_app, jsonify, render_template_string, request

from qr_encoder import (
    DEFAULT_BACKEND,
    DEFAULT_ERROR_CORRECTION,
    EncodingError,
    available_backends,
    encode,
    normalize_error_correction,
)
from qr_render import DEFAULT_BLOCK_SIZE, VectorDocument, render
from qr_validation import ValidationError, validate

logger = logging.getLogger(__name__)

SVG_TEMPLATE = """<svg version="1.1"
	width="{{ doc.canvas_size }}"
	height="{{ doc.canvas_size }}"
	xmlns="http://www.w3.org/2000/svg">
{%- for shape in doc.shapes %}
{%- if shape.kind == "circle" -%}
<circle cx="{{ shape.cx|num }}" cy="{{ shape.cy|num }}" r="{{ shape.r|num }}" fill="{{ shape.fill }}"></circle>
{%- elif shape.kind == "diamond" -%}
<polygon points="{% for x, y in shape.points %}{{ x|num }},{{ y|num }}{% if not loop.last %} {% endif %}{% endfor %}" fill="{{ shape.fill }}"></polygon>
{%- else -%}
<rect x="{{ shape.x|num }}" y="{{ shape.y|num }}" width="{{ shape.size|num }}" height="{{ shape.size|num }}" fill="{{ shape.fill }}"></rect>
{%- endif %}
{%- endfor %}
</svg>
"""

NOT_FOUND_TEXT = "404, not found!"

qr_bp = Blueprint("qr_bp", __name__)


@qr_bp.app_template_filter("num")
def _svg_number(value: Union[int, float]) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _parse_block_size(raw: Any) -> int:
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValueError(f"QR_BLOCK_SIZE must be a whole number (got {raw!r})")
    try:
        block_size = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError("QR_BLOCK_SIZE must be an integer") from exc
    if block_size <= 0:
        raise ValueError("QR_BLOCK_SIZE must be positive")
    return block_size


def _load_config(overrides: Optional[Mapping[str, Any]] = None) -> dict:
    """
    Build the QR settings.
    Priority:
      1. Explicit overrides (tests, embedding apps)
      2. QR_* environment variables
      3. Built-in defaults
    """
    config = {
        "QR_BLOCK_SIZE": os.getenv("QR_BLOCK_SIZE", str(DEFAULT_BLOCK_SIZE)),
        "QR_ERROR_CORRECTION": os.getenv("QR_ERROR_CORRECTION", DEFAULT_ERROR_CORRECTION),
        "QR_ENCODER": os.getenv("QR_ENCODER", DEFAULT_BACKEND),
    }
    if overrides:
        config.update(overrides)

    config["QR_BLOCK_SIZE"] = _parse_block_size(config["QR_BLOCK_SIZE"])
    config["QR_ERROR_CORRECTION"] = normalize_error_correction(config["QR_ERROR_CORRECTION"])

    if config["QR_ENCODER"] not in available_backends():
        raise ValueError(
            f"QR_ENCODER must be one of {', '.join(available_backends())}"
        )
    return config


def _error_response(message: str, status: int = 400):
    return jsonify({"message": message}), status


@qr_bp.app_errorhandler(404)
@qr_bp.app_errorhandler(405)
def _not_found(_error):
    return NOT_FOUND_TEXT, 404, {"Content-Type": "text/plain; charset=utf-8"}


@qr_bp.before_request
def _only_get():
    # Flask answers HEAD on GET rules by itself.
    if request.method != "GET":
        abort(404)


def _serialize_svg(document: VectorDocument) -> str:
    return render_template_string(SVG_TEMPLATE, doc=document)


@qr_bp.route("/", methods=["GET"], provide_automatic_options=False)
def generate_qr_svg():
    result = validate(request.args)
    if isinstance(result, ValidationError):
        logger.info("Rejected QR request: %s", result.message)
        return _error_response(result.message)

    try:
        grid = encode(
            result.data,
            error_correction=current_app.config["QR_ERROR_CORRECTION"],
            backend=current_app.config["QR_ENCODER"],
        )
    except EncodingError as exc:
        logger.warning("QR encoding failed for %d characters: %s", len(result.data), exc.__cause__)
        return _error_response(exc.message)

    document = render(grid, result, block_size=current_app.config["QR_BLOCK_SIZE"])
    logger.debug(
        "Rendered %d %s modules on a %dx%d canvas",
        len(document.shapes),
        result.shape.value,
        document.canvas_size,
        document.canvas_size,
    )
    return current_app.response_class(_serialize_svg(document), mimetype="image/svg+xml")


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    flask_app = Flask(__name__)
    flask_app.config.update(_load_config(overrides))
    flask_app.register_blueprint(qr_bp)
    return flask_app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(levelname)s: %(message)s",
    )
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
