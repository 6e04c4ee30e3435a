"""Utilities for loading report settings from YAML/JSON sources."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from .core.currency import Currency, get_currency
from .core.errors import ConfigError
from .core.granularity import Granularity
from .core.utils import parse_month

__all__ = [
    "ConfigError",
    "ReportConfig",
    "load_report_config",
]

_KNOWN_KEYS = {"start", "end", "granularity", "currency", "decimals", "today"}


@dataclass(slots=True)
class ReportConfig:
    """Normalized report settings ready for the CLI or a caller."""

    start: str | None = None
    end: str | None = None
    granularity: Granularity = Granularity.MONTHLY
    currency: Currency = field(default_factory=lambda: get_currency(None))
    today: date | None = None
    source: str = "<defaults>"

    def merged(self, **overrides: Any) -> ReportConfig:
        """Copy with every non-None override applied."""
        values = {
            "start": self.start,
            "end": self.end,
            "granularity": self.granularity,
            "currency": self.currency,
            "today": self.today,
            "source": self.source,
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return ReportConfig(**values)


def load_report_config(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> ReportConfig:
    """
    Parse report settings from YAML/JSON/dict.

    Recognised keys: ``start`` and ``end`` (months, 'YYYY-MM'),
    ``granularity`` ('monthly' or 'daily'), ``currency`` (ISO code),
    ``decimals`` (minor-unit digits, overrides the currency default) and
    ``today`` (ISO date used for clamping).

    Raises:
        ConfigError: For unknown keys, bad values or unsupported formats
        FileNotFoundError: If a path does not exist
    """
    mapping, label = _read_source(source, format=format)

    unknown = sorted(set(mapping) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{label}: unknown keys: {', '.join(unknown)}")

    granularity = Granularity.MONTHLY
    if mapping.get("granularity") is not None:
        try:
            granularity = Granularity.parse(mapping["granularity"])
        except ValueError as exc:
            raise ConfigError(f"{label}::granularity: {exc}") from exc

    currency = get_currency(
        _coerce_optional_str(mapping.get("currency"), f"{label}::currency")
    )
    decimals = _coerce_decimals(mapping.get("decimals"), f"{label}::decimals")
    if decimals is not None and decimals != currency.decimals:
        currency = Currency(currency.code, decimals=decimals, rounding=currency.rounding)

    return ReportConfig(
        start=_coerce_month(mapping.get("start"), f"{label}::start"),
        end=_coerce_month(mapping.get("end"), f"{label}::end"),
        granularity=granularity,
        currency=currency,
        today=_coerce_date(mapping.get("today"), f"{label}::today"),
        source=label,
    )


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    if fmt in {"yaml", "yml", ""}:
        data = yaml.safe_load(text)
    elif fmt == "json":
        data = json.loads(text)
    else:
        raise ConfigError(f"Unsupported config format '{fmt}' for {path}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping (source={path})")
    return data, str(path)


def _coerce_month(value: Any, ctx: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, (str, date)):
        raise ConfigError(f"{ctx}: expected a 'YYYY-MM' month")
    try:
        month = parse_month(value)
    except ValueError as exc:
        raise ConfigError(f"{ctx}: invalid month '{value}'") from exc
    return f"{month.year:04d}-{month.month:02d}"


def _coerce_date(value: Any, ctx: str) -> date | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigError(f"{ctx}: invalid ISO date '{value}'") from exc
    raise ConfigError(f"{ctx}: expected ISO date string")


def _coerce_decimals(value: Any, ctx: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx}: decimals must be an integer")
    if value < 0:
        raise ConfigError(f"{ctx}: decimals must be >= 0")
    return value


def _coerce_optional_str(value: Any, ctx: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx}: expected non-empty string")
    return value
