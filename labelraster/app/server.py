from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request

from ..config import MAX_CONTENT_LENGTH, Settings, load_settings
from ..errors import DecodeError, DeviceError, DeviceNotFound, InterfaceClaimError, TransmissionError
from ..protocol import DEFAULT_GEOMETRY, PrintGeometry
from ..rendering import decode_image, rasterize
from ..transport import UsbTransport

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    DeviceNotFound: 503,
    InterfaceClaimError: 503,
    TransmissionError: 502,
}


def _error(message: str, status: int) -> tuple:
    return jsonify({"status": "error", "message": message}), status


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[UsbTransport] = None,
    geometry: PrintGeometry = DEFAULT_GEOMETRY,
) -> Flask:
    """Build the print agent: one CORS-open endpoint that prints a posted image."""
    settings = settings or load_settings()
    if transport is None:
        transport = UsbTransport(settings.vendor_id, settings.product_id, settings.write_timeout_ms)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
    app.config["LABELRASTER_SETTINGS"] = settings

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.route("/print", methods=["POST", "OPTIONS"], provide_automatic_options=False)
    def print_label():
        if request.method == "OPTIONS":
            return Response(status=200)
        try:
            image = decode_image(request.get_data())
        except DecodeError as exc:
            logger.warning("Rejected print request: %s", exc)
            return _error("Invalid image format", 400)
        try:
            data = rasterize(image, geometry)
        except (OSError, ValueError) as exc:
            logger.warning("Cannot rasterize %s image: %s", image.mode, exc)
            return _error("Unsupported image", 400)
        try:
            transport.transmit(data)
        except DeviceError as exc:
            logger.error("Print failed: %s", exc)
            return _error(str(exc), ERROR_STATUS.get(type(exc), 500))
        return jsonify({"status": "success", "bytes": len(data)}), 200

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify(
            {
                "status": "ok",
                "device": f"{settings.vendor_id:04x}:{settings.product_id:04x}",
                "geometry": {
                    "width": geometry.width,
                    "height": geometry.height,
                    "margin": geometry.margin,
                    "threshold": geometry.threshold,
                },
            }
        )

    return app


def serve(settings: Settings) -> None:
    app = create_app(settings)
    logger.info("Print agent running on %s:%d", settings.host, settings.port)
    # one transmission per printer at a time is enforced by the transport lock
    app.run(host=settings.host, port=settings.port, threaded=True)
