import re
from enum import Enum

# Covers www., m., vm. and vt. hosts
TIKTOK_PATTERN = re.compile(r"tiktok\.com/", re.IGNORECASE)


class Platform(str, Enum):
    """Supported media platforms"""
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"


def is_tiktok_url(url: str) -> bool:
    return TIKTOK_PATTERN.search(url) is not None


def classify_url(url: str) -> Platform:
    """
    Classify a URL by platform.
    Anything that is not TikTok is treated as YouTube and validated later.
    """
    if is_tiktok_url(url):
        return Platform.TIKTOK
    return Platform.YOUTUBE
