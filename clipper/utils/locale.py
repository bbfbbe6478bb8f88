from typing import List, Optional, Tuple
from urllib.parse import urlparse

from clipper.config.settings import config


def _parse_accept_language(header: str) -> List[str]:
    """Primary language tags ordered by q-weight, highest first"""
    weighted: List[Tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        if not tag:
            continue
        weight = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                weight = float(params[2:])
            except ValueError:
                weight = 0.0
        # stable on position for equal weights
        weighted.append((-weight, position, tag.split("-")[0].lower()))
    return [tag for _, _, tag in sorted(weighted)]


def get_locale(accept_language: Optional[str] = None) -> str:
    """Pick the best supported locale from an Accept-Language header"""
    if accept_language:
        for locale in _parse_accept_language(accept_language):
            if locale in config.i18n.supported_locales:
                return locale
    return config.i18n.default_locale


def safe_url_for_log(url: str) -> str:
    """Strip query strings from URLs before logging"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return "invalid_url"

    if not parsed.scheme or not parsed.netloc:
        return "invalid_url"

    base_url = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    return f"{base_url}?..." if parsed.query else base_url
