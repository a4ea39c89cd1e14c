"""Application configuration.

AppConfig is a slotted dataclass: typed, IDE-autocompletable fields for the
keys the core reads, plus an ``extra`` dict for anything else an app wants
to keep alongside them. All access from the core goes through
``get()`` / ``set()``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class AppConfig:
    """Application configuration.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, route={"/": index})
        config = AppConfig.from_mapping({"debug": True, "site_name": "Demo"})
    """

    # Re-raise handler failures to the host instead of rendering a 500
    debug: bool = False

    # Turn warnings into exceptions during run(); report fatal errors at shutdown
    error: bool = False

    # Process timezone (e.g. "UTC", "Europe/Paris"), applied at init()
    timezone: str | None = None

    # Template directory for App.render()
    views: str | Path | None = None

    # How many times a request may fall through via Pass before it is a 404
    pass_limit: int = 8

    # Route table: path pattern -> handler
    route: Mapping[str, Any] = field(default_factory=dict)

    # Named controllers: name -> Controller subclass
    controllers: Mapping[str, type] = field(default_factory=dict)

    # Anything else
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "AppConfig":
        """Build a config from a plain mapping.

        Known keys become typed fields; the rest land in ``extra``.
        """
        known = {f.name for f in fields(cls)} - {"extra"}
        config = cls(**{k: v for k, v in mapping.items() if k in known})
        config.extra.update({k: v for k, v in mapping.items() if k not in known})
        return config

    def get(self, key: str) -> Any:
        """Return the value for *key*, or ``None`` when unset."""
        if key != "extra" and key in _FIELD_NAMES:
            return getattr(self, key)
        return self.extra.get(key)

    def set(self, key: str, value: Any) -> Any:
        """Set *key* to *value* and return *value*."""
        if key != "extra" and key in _FIELD_NAMES:
            setattr(self, key, value)
        else:
            self.extra[key] = value
        return value


_FIELD_NAMES: frozenset[str] = frozenset(f.name for f in fields(AppConfig))

ConfigLike = AppConfig | Mapping[str, Any] | None


def coerce_config(config: ConfigLike) -> AppConfig:
    """Accept an AppConfig, a plain mapping, or None."""
    if config is None:
        return AppConfig()
    if isinstance(config, AppConfig):
        return config
    return AppConfig.from_mapping(config)
