import functools
import json
import logging
import os
from typing import Any, Callable, Dict, Optional

from clipper.config.settings import config

logger = logging.getLogger(__name__)

LOCALES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "locales")


def _flatten(tree: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """{"error": {"timeout": "..."}} -> {"error.timeout": "..."}"""
    flat: Dict[str, str] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = str(value)
    return flat


class I18n:
    """Message catalog keyed by dotted names, one JSON file per locale"""

    def __init__(self, locales_dir: str = LOCALES_DIR, default_locale: Optional[str] = None):
        self.default_locale = default_locale or config.i18n.default_locale
        self.catalogs: Dict[str, Dict[str, str]] = {}
        self.load_locales(locales_dir)

    def load_locales(self, locales_dir: str) -> None:
        if not os.path.isdir(locales_dir):
            logger.warning(f"Locales directory not found at {locales_dir}")
            return

        for filename in sorted(os.listdir(locales_dir)):
            locale_code, ext = os.path.splitext(filename)
            if ext != ".json":
                continue
            try:
                with open(os.path.join(locales_dir, filename), "r", encoding="utf-8") as f:
                    self.catalogs[locale_code] = _flatten(json.load(f))
            except (OSError, ValueError) as e:
                logger.error(f"Error loading locale {locale_code}: {e}")

    def get(self, key: str, locale: Optional[str] = None, **kwargs) -> str:
        """
        Look up key in locale, then the default locale.
        Unknown keys come back unchanged so a missing entry is visible, not fatal.
        """
        template = None
        for code in (locale, self.default_locale, "en"):
            if code and key in self.catalogs.get(code, {}):
                template = self.catalogs[code][key]
                break

        if template is None:
            return key

        try:
            return template.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return template

    def translator(self, locale: Optional[str]) -> Callable[..., str]:
        return functools.partial(self.get, locale=locale)

i18n = I18n()
