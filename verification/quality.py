import asyncio
import logging
import cv2
import numpy as np
from typing import Optional, Tuple
from config import settings
from .file_converter import ImageDecodeError, decode_greyscale
from .models import ImageQualityResult
from .utils import clamp

logger = logging.getLogger(__name__)

# Fraction of the shorter side used for the inner border sample line
BORDER_MARGIN_RATIO = 0.05


class ImageQualityAnalyzer:
    """
    Computes blur, brightness/contrast and crop signals for a document image.
    Any decode failure degrades to the default result instead of raising.
    """

    def __init__(self,
                 blur_threshold: Optional[float] = None,
                 crop_edge_threshold: Optional[float] = None):
        self.blur_threshold = settings.BLUR_VARIANCE_THRESHOLD if blur_threshold is None else blur_threshold
        self.crop_edge_threshold = (settings.CROP_EDGE_DENSITY_THRESHOLD
                                    if crop_edge_threshold is None else crop_edge_threshold)

    def laplacian_variance(self, gray: np.ndarray) -> float:
        """Variance of the 3x3 Laplacian response over the interior pixels"""
        # ksize=1 applies the [0,1,0; 1,-4,1; 0,1,0] aperture
        response = cv2.Laplacian(gray, cv2.CV_64F, ksize=1)[1:-1, 1:-1]
        if response.size == 0:
            return 0.0
        mean = response.mean()
        return float((response * response).mean() - mean * mean)

    def brightness_contrast(self, gray: np.ndarray) -> Tuple[float, float]:
        """Normalized mean and standard deviation of the pixel values"""
        if gray.size == 0:
            return 0.5, 0.5
        pixels = gray.astype(np.float64)
        brightness = clamp(pixels.mean() / 255, 0.0, 1.0)
        contrast = clamp(pixels.std() / 128, 0.0, 1.0)
        return float(brightness), float(contrast)

    def _row_edges(self, gray: np.ndarray, y: int) -> np.ndarray:
        # Out-of-bounds neighbours fall back to the centre pixel
        row = gray[y].astype(np.int32)
        right = np.append(row[1:], row[-1])
        down = gray[y + 1].astype(np.int32) if y + 1 < gray.shape[0] else row
        return np.abs(row - right) + np.abs(row - down)

    def _column_edges(self, gray: np.ndarray, x: int) -> np.ndarray:
        column = gray[:, x].astype(np.int32)
        right = gray[:, x + 1].astype(np.int32) if x + 1 < gray.shape[1] else column
        down = np.append(column[1:], column[-1])
        return np.abs(column - right) + np.abs(column - down)

    def border_edge_density(self, gray: np.ndarray) -> float:
        """
        Mean finite-difference edge magnitude along the image borders.
        Only the sampled lines are differenced; a zero-valued neighbour is
        a real neighbour, not a missing one.
        """
        height, width = gray.shape

        margin = int(min(width, height) * BORDER_MARGIN_RATIO)
        rows = [y for y in (0, 1, 2, margin, height - 1, height - 2, height - 3) if 0 <= y < height]
        cols = [x for x in (0, 1, 2, margin, width - 1, width - 2, width - 3) if 0 <= x < width]

        total = sum(int(self._row_edges(gray, y).sum()) for y in rows)
        total += sum(int(self._column_edges(gray, x).sum()) for x in cols)
        count = len(rows) * width + len(cols) * height
        return float(total) / max(1, count)

    def check_blur(self, gray: np.ndarray) -> Tuple[float, bool]:
        score = self.laplacian_variance(gray)
        return score, score < self.blur_threshold

    def check_crop(self, gray: np.ndarray) -> bool:
        return self.border_edge_density(gray) < self.crop_edge_threshold

    def evaluate(self, gray: np.ndarray) -> ImageQualityResult:
        """Evaluate an already decoded greyscale plane"""
        if gray.ndim != 2 or gray.shape[0] == 0 or gray.shape[1] == 0:
            return ImageQualityResult()

        blur_score, blur_likely = self.check_blur(gray)
        brightness, contrast = self.brightness_contrast(gray)
        crop_likely = self.check_crop(gray)

        logger.debug(
            "Image quality: blur=%.1f brightness=%.2f contrast=%.2f crop=%s",
            blur_score, brightness, contrast, crop_likely
        )
        return ImageQualityResult(
            blur_score=blur_score,
            blur_likely=blur_likely,
            brightness=brightness,
            contrast=contrast,
            crop_likely=crop_likely
        )

    async def analyze(self, image_bytes: bytes) -> ImageQualityResult:
        """Decode image bytes and evaluate them"""
        try:
            gray = await asyncio.to_thread(decode_greyscale, image_bytes)
        except ImageDecodeError as e:
            logger.warning("Image could not be decoded: %s", e)
            return ImageQualityResult()
        except Exception:
            logger.exception("Unexpected error while decoding image")
            return ImageQualityResult()

        return self.evaluate(gray)
