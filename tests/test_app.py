import pytest
from fastapi.testclient import TestClient

from app import app
from tests.conftest import encode_png


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_verify_uploads(client, noise_image):
    response = client.post(
        "/verify",
        files=[
            ("files", ("passport_scan.png", encode_png(noise_image), "image/png")),
            ("files", ("selfie.jpg", b"\xff" * 300, "image/jpeg")),
        ],
        data={"categories": ["id_document", "face_photo"], "country": "ZZZ", "document_type": "passport"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["counts"] == {"documents": 1, "face": 1}
    assert body["signals"]["quality"]["image"]["blur_likely"] is False
    assert body["signals"]["country_validation"] is None
    assert body["assets"][0]["mime_type"] == "image/png"


def test_verify_rejects_mismatched_categories(client):
    response = client.post(
        "/verify",
        files=[("files", ("passport.jpg", b"data", "image/jpeg"))],
        data={"categories": ["id_document", "face_photo"]},
    )

    assert response.status_code == 400
