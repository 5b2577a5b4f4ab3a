import io
import numpy as np
from PIL import Image, UnidentifiedImageError
import pillow_heif
from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFPageCountError, PDFSyntaxError, PDFInfoNotInstalledError

pillow_heif.register_heif_opener()

PDF_MAGIC = b"%PDF"


class ImageDecodeError(ValueError):
    """Raised when an uploaded buffer cannot be turned into pixels"""


def is_pdf(data: bytes) -> bool:
    return data[:len(PDF_MAGIC)] == PDF_MAGIC


def _open_image(data: bytes) -> Image.Image:
    # -------- Case 1: PDF, first page only --------
    if is_pdf(data):
        try:
            pages = convert_from_bytes(data, dpi=150, first_page=1, last_page=1)
        except (PDFPageCountError, PDFSyntaxError, PDFInfoNotInstalledError) as e:
            raise ImageDecodeError(f"Could not rasterize PDF: {e}") from e
        if not pages:
            raise ImageDecodeError("PDF has no pages")
        return pages[0]

    # -------- Case 2: raster image or HEIC --------
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Unsupported or corrupt image: {e}") from e
    return img


def decode_greyscale(data: bytes) -> np.ndarray:
    """
    Decode an uploaded buffer (image / HEIC / PDF) to a greyscale pixel plane.
    Returns a 2-D uint8 array, row-major, one byte per pixel.
    """
    if not data:
        raise ImageDecodeError("Empty buffer")

    img = _open_image(data)
    return np.asarray(img.convert("L"), dtype=np.uint8)
