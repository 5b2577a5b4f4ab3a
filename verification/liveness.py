"""
Video liveness placeholder.

Motion is guessed from the size a HEAD request reports for the video:
larger recordings are assumed to contain movement. This is a low-confidence
stand-in until frame-difference analysis replaces it.
"""

import asyncio
import logging
import requests
from typing import Optional
from config import settings
from .models import VideoLivenessResult
from .utils import is_valid_url

logger = logging.getLogger(__name__)

MOTION_SCORE_LIKELY = 0.7
MOTION_SCORE_UNLIKELY = 0.2


class VideoLivenessHeuristic:

    def __init__(self,
                 size_threshold: Optional[int] = None,
                 timeout: Optional[float] = None):
        self.size_threshold = settings.MOTION_SIZE_THRESHOLD_BYTES if size_threshold is None else size_threshold
        self.timeout = settings.LIVENESS_PROBE_TIMEOUT if timeout is None else timeout

    def _content_length(self, response: requests.Response) -> int:
        try:
            return int(response.headers.get("content-length", 0))
        except (TypeError, ValueError):
            return 0

    def score_size(self, size: int) -> VideoLivenessResult:
        motion_likely = size > self.size_threshold
        return VideoLivenessResult(
            motion_likely=motion_likely,
            motion_score=MOTION_SCORE_LIKELY if motion_likely else MOTION_SCORE_UNLIKELY
        )

    async def analyze(self, resource_url: str) -> VideoLivenessResult:
        if not is_valid_url(resource_url):
            return VideoLivenessResult()

        try:
            response = await asyncio.to_thread(
                requests.head, resource_url, timeout=self.timeout, allow_redirects=True
            )
        except requests.RequestException as e:
            logger.warning("Liveness probe failed for %s: %s", resource_url, e)
            return VideoLivenessResult()

        if not 200 <= response.status_code < 300:
            logger.warning("Liveness probe for %s returned %s", resource_url, response.status_code)
            return VideoLivenessResult()

        size = self._content_length(response)
        logger.debug("Video %s is %d bytes", resource_url, size)
        return self.score_size(size)
