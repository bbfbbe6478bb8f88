import hashlib
import re

_DISALLOWED = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s", re.ASCII)


def sanitize_title(title: str) -> str:
    """
    Reduce a title to ASCII word characters, spaces and hyphens.
    Safe for Content-Disposition headers and filesystem paths.
    """
    name = _DISALLOWED.sub("", title or "")
    name = _WHITESPACE.sub(" ", name)
    return name.strip()


def attachment_filename(title: str, ext: str, fallback: str) -> str:
    """Build '<sanitized title>.<ext>', using fallback when nothing survives"""
    base = sanitize_title(title) or fallback
    return f"{base}.{ext}"


def url_fallback_name(url: str, prefix: str = "video") -> str:
    """Stable name derived from the source URL, e.g. 'video_1a2b3c4d'"""
    digest = hashlib.sha256(url.encode()).hexdigest()[:8]
    return f"{prefix}_{digest}"
