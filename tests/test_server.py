import pytest

from labelraster.app import server
from labelraster.app.server import create_app
from labelraster.config import Settings
from labelraster.errors import DeviceNotFound, InterfaceClaimError, TransmissionError
from labelraster.protocol import parse_raster_job


class RecordingTransport:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def transmit(self, data):
        if self.error is not None:
            raise self.error
        self.sent.append(data)
        return len(data) + 2


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(transport):
    app = create_app(Settings(), transport=transport)
    app.testing = True
    return app.test_client()


def test_print_sends_raster_to_printer(client, transport, black_png):
    response = client.post("/print", data=black_png, content_type="image/png")
    assert response.status_code == 200
    assert response.get_json()["status"] == "success"
    assert len(transport.sent) == 1
    job = parse_raster_job(transport.sent[0])
    assert job.width_bytes == 64
    assert job.height == 192


def test_print_sets_cors_headers(client, black_png):
    response = client.post("/print", data=black_png)
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type"


def test_preflight_skips_processing(client, transport):
    response = client.open("/print", method="OPTIONS")
    assert response.status_code == 200
    assert response.data == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert transport.sent == []


@pytest.mark.parametrize("body", [b"", b"not an image", b"\x89PNG\r\n\x1a\n\x00\x00"])
def test_undecodable_body_is_client_error(client, transport, body):
    response = client.post("/print", data=body)
    assert response.status_code == 400
    assert response.get_json()["status"] == "error"
    assert transport.sent == []


@pytest.mark.parametrize(
    "error, status",
    [
        (DeviceNotFound(0x4B43, 0x3538), 503),
        (InterfaceClaimError("busy"), 503),
        (TransmissionError("short write"), 502),
    ],
)
def test_device_errors_map_to_status(black_png, error, status):
    app = create_app(Settings(), transport=RecordingTransport(error))
    client = app.test_client()
    response = client.post("/print", data=black_png)
    assert response.status_code == status
    assert response.get_json()["message"] == str(error)


def test_agent_survives_device_failure(black_png):
    transport = RecordingTransport(DeviceNotFound(0x4B43, 0x3538))
    client = create_app(Settings(), transport=transport).test_client()
    assert client.post("/print", data=black_png).status_code == 503
    transport.error = None
    assert client.post("/print", data=black_png).status_code == 200


def test_get_is_not_allowed(client):
    assert client.get("/print").status_code == 405


def test_health_reports_device_and_geometry(client):
    body = client.get("/health").get_json()
    assert body["device"] == "4b43:3538"
    assert body["geometry"] == {"width": 384, "height": 192, "margin": 125, "threshold": 128}


def test_corrupt_png_is_client_error(client, transport, corrupt_png):
    response = client.post("/print", data=corrupt_png, content_type="image/png")
    assert response.status_code == 400
    assert response.get_json()["status"] == "error"
    assert transport.sent == []


def test_rasterize_failure_returns_json_error(client, transport, black_png, monkeypatch):
    def broken(image, geometry):
        raise ValueError("image has wrong mode")

    monkeypatch.setattr(server, "rasterize", broken)
    response = client.post("/print", data=black_png)
    assert response.status_code == 400
    assert response.get_json() == {"status": "error", "message": "Unsupported image"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert transport.sent == []
