from types import SimpleNamespace

import pytest
import requests

from verification.liveness import VideoLivenessHeuristic
from verification.models import VideoLivenessResult

VIDEO_URL = "https://storage.example.com/videos/selfie.webm"


def fake_head(status_code=200, headers=None, calls=None):
    def head(url, **kwargs):
        if calls is not None:
            calls.append((url, kwargs))
        return SimpleNamespace(status_code=status_code, headers=headers or {})
    return head


@pytest.fixture
def heuristic():
    return VideoLivenessHeuristic()


@pytest.mark.asyncio
async def test_large_video_suggests_motion(heuristic, monkeypatch):
    calls = []
    monkeypatch.setattr(requests, "head", fake_head(headers={"content-length": "204800"}, calls=calls))

    result = await heuristic.analyze(VIDEO_URL)

    assert result.motion_likely is True
    assert result.motion_score == 0.7
    assert calls[0][0] == VIDEO_URL
    assert calls[0][1]["timeout"] is None


@pytest.mark.asyncio
async def test_small_video_is_unlikely_to_move(heuristic, monkeypatch):
    monkeypatch.setattr(requests, "head", fake_head(headers={"content-length": "102400"}))

    result = await heuristic.analyze(VIDEO_URL)

    assert result.motion_likely is False
    assert result.motion_score == 0.2


@pytest.mark.asyncio
async def test_missing_content_length_counts_as_empty(heuristic, monkeypatch):
    monkeypatch.setattr(requests, "head", fake_head(headers={"content-length": "lots"}))

    result = await heuristic.analyze(VIDEO_URL)

    assert result == VideoLivenessResult(motion_likely=False, motion_score=0.2)


@pytest.mark.asyncio
async def test_error_status_gives_no_score(heuristic, monkeypatch):
    monkeypatch.setattr(requests, "head", fake_head(status_code=404))

    result = await heuristic.analyze(VIDEO_URL)

    assert result.motion_likely is False
    assert result.motion_score is None


@pytest.mark.asyncio
async def test_unreachable_host_gives_no_score(heuristic, monkeypatch):
    def unreachable(url, **kwargs):
        raise requests.ConnectionError("connection refused")
    monkeypatch.setattr(requests, "head", unreachable)

    result = await heuristic.analyze(VIDEO_URL)

    assert result == VideoLivenessResult()


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/video.mp4"])
async def test_invalid_url_is_not_probed(heuristic, monkeypatch, url):
    calls = []
    monkeypatch.setattr(requests, "head", fake_head(calls=calls))

    result = await heuristic.analyze(url)

    assert result.motion_likely is False
    assert calls == []


def test_threshold_is_configurable():
    heuristic = VideoLivenessHeuristic(size_threshold=10)
    assert heuristic.score_size(11).motion_likely is True
    assert heuristic.score_size(10).motion_likely is False
