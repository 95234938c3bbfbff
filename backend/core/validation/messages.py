"""Message Resolution

Violation messages are looked up by key in YAML catalogs, one file per
locale (``en.yaml``, ``fr.yaml``). Nested mappings flatten into dotted keys:

    validation:
      required: "{field} is required"

resolves ``validation.required``. Lookup falls back from the requested
locale (``fr-CA``) to its language (``fr``), then to the default locale,
then to the raw key. Resolution never raises.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from core.logging import validation_logger

log = validation_logger()

DEFAULT_MESSAGES_DIR = Path(__file__).parent / "locales"


def normalize_locale(locale: str) -> str:
    return locale.strip().replace("_", "-").lower()


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict): flat.update(_flatten(value, full_key))
        elif value is not None: flat[full_key] = str(value)
    return flat


class MessageCatalog:
    """Locale -> key -> message template."""

    def __init__(self, bundles: dict[str, dict[str, str]] | None = None):
        self._bundles: dict[str, dict[str, str]] = {}
        for locale, messages in (bundles or {}).items(): self.add(locale, messages)

    @classmethod
    def from_directories(cls, *directories: Path) -> MessageCatalog:
        """Load every ``<locale>.yaml`` of each directory; later directories override earlier ones."""
        catalog = cls()
        for directory in directories:
            for path in sorted(Path(directory).glob("*.yaml")):
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                catalog.add(path.stem, _flatten(data))
                log.debug("message_bundle_loaded", locale=path.stem, path=str(path))
        return catalog

    def add(self, locale: str, messages: dict[str, str]) -> None:
        self._bundles.setdefault(normalize_locale(locale), {}).update(_flatten(messages))

    def lookup(self, locale: str, key: str) -> str | None:
        return self._bundles.get(normalize_locale(locale), {}).get(key)

    @property
    def locales(self) -> frozenset[str]: return frozenset(self._bundles)


class MessageResolver:
    """Resolves message keys to localized, interpolated text."""

    def __init__(self, catalog: MessageCatalog | None = None, default_locale: str = "en"):
        self.catalog = catalog or MessageCatalog()
        self.default_locale = normalize_locale(default_locale)

    def candidates(self, locale: str | None) -> list[str]:
        """Locales tried in order for a lookup."""
        chain: list[str] = []
        if locale:
            normalized = normalize_locale(locale)
            chain.append(normalized)
            if "-" in normalized: chain.append(normalized.split("-", 1)[0])
        if self.default_locale not in chain: chain.append(self.default_locale)
        return chain

    def resolve(self, key: str, locale: str | None = None, params: dict[str, Any] | None = None) -> str:
        for candidate in self.candidates(locale):
            if (template := self.catalog.lookup(candidate, key)) is not None:
                return self._format(template, params or {})
        return key

    @staticmethod
    def _format(template: str, params: dict[str, Any]) -> str:
        try: return template.format(**params)
        except (KeyError, IndexError, ValueError, AttributeError): return template


@lru_cache
def get_message_resolver() -> MessageResolver:
    """Resolver over the built-in catalogs only."""
    from core.config import settings
    return MessageResolver(MessageCatalog.from_directories(DEFAULT_MESSAGES_DIR), settings.VALIDATION_DEFAULT_LOCALE)
