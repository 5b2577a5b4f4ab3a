from datetime import datetime, timezone
from urllib.parse import urlparse


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into the closed range [low, high]"""
    return max(low, min(high, value))


def is_valid_url(url: str) -> bool:
    """Check if string is an absolute http(s) URL"""
    if not url:
        return False
    try:
        result = urlparse(url)
    except ValueError:
        return False
    return result.scheme in ("http", "https") and bool(result.netloc)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
