import json
import logging
import os
from typing import Any, Dict, List, Optional
from vidrelay.config.settings import config

logger = logging.getLogger(__name__)

LOCALES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "locales")
FALLBACK_LOCALE = "en"

def load_catalogs(locales_dir: str) -> Dict[str, Dict[str, Any]]:
    """Read every <locale>.json in locales_dir"""
    catalogs: Dict[str, Dict[str, Any]] = {}
    if not os.path.isdir(locales_dir):
        logger.warning(f"Locales directory not found at {locales_dir}")
        return catalogs

    for filename in sorted(os.listdir(locales_dir)):
        code, ext = os.path.splitext(filename)
        if ext != ".json":
            continue
        try:
            with open(os.path.join(locales_dir, filename), "r", encoding="utf-8") as f:
                catalogs[code] = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading locale {code}: {e}")
    return catalogs

class I18n:
    """Message catalogs keyed by dotted names such as "error.invalid_url" """

    def __init__(self, locales_dir: str = LOCALES_DIR):
        self.default_locale = config.i18n.default_locale
        self.catalogs = load_catalogs(locales_dir)

    def _chain(self, locale: Optional[str]) -> List[str]:
        chain = [locale, self.default_locale, FALLBACK_LOCALE]
        return [code for i, code in enumerate(chain) if code and code in self.catalogs and code not in chain[:i]]

    def _lookup(self, catalog: Dict[str, Any], key: str) -> Optional[str]:
        node: Any = catalog
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None

    def get(self, key: str, locale: Optional[str] = None, **kwargs) -> str:
        """Translated message, falling back to the default locale, then the key itself"""
        for code in self._chain(locale):
            message = self._lookup(self.catalogs[code], key)
            if message is not None:
                try:
                    return message.format(**kwargs)
                except KeyError:
                    return message
        return key

i18n = I18n()
