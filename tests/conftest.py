"""
Shared fixtures for the verification engine tests.
"""
import cv2
import numpy as np
import pytest

from config import settings
from verification.models import Asset


def td3_lines(names="DOE<<JOHN<MICHAEL", document_number="L898902C3", nationality="USA",
              dob="900115", sex="M", expiry="301231", personal_number="ZE184226B"):
    line1 = f"P<USA{names}".ljust(44, "<")
    line2 = (
        document_number.ljust(9, "<") + "6" + nationality + dob + "1" + sex + expiry + "5"
        + personal_number.ljust(14, "<") + "1" + "0"
    )
    assert len(line1) == 44 and len(line2) == 44
    return line1, line2


def encode_png(pixels: np.ndarray) -> bytes:
    ok, buffer = cv2.imencode(".png", pixels)
    assert ok
    return buffer.tobytes()


@pytest.fixture(autouse=True)
def no_processing_delay(monkeypatch):
    """The mock analysis sleeps for a second by default."""
    monkeypatch.setattr(settings, "MOCK_PROCESSING_DELAY", 0.0)


@pytest.fixture
def td3_text():
    line1, line2 = td3_lines()
    return f"PASSPORT\nUNITED STATES OF AMERICA\n{line1}\n{line2}\n"


@pytest.fixture
def passport_asset():
    return Asset(name="passport_scan.jpg", category="id_document", mime_type="image/jpeg", size=20480)


@pytest.fixture
def invoice_asset():
    return Asset(name="invoice_2024.pdf", category="id_document", mime_type="application/pdf", size=8192)


@pytest.fixture
def selfie_asset():
    return Asset(name="selfie.jpg", category="face_photo", mime_type="image/jpeg", size=4096)


@pytest.fixture
def grey_image():
    return np.full((64, 64), 128, dtype=np.uint8)


@pytest.fixture
def bordered_image():
    """Solid 10-pixel border around a checkerboard interior"""
    pixels = np.full((100, 100), 200, dtype=np.uint8)
    yy, xx = np.indices((80, 80))
    pixels[10:90, 10:90] = ((yy + xx) % 2 * 255).astype(np.uint8)
    return pixels


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(120, 160), dtype=np.uint8)
