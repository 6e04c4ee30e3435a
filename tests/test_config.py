from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from cashflowlab.config import ConfigError, ReportConfig, load_report_config
from cashflowlab.core.granularity import Granularity


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_yaml_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "report.yaml",
        "start: 2024-01\nend: 2024-06\ngranularity: daily\ncurrency: jpy\ntoday: 2024-03-15\n",
    )
    cfg = load_report_config(path)

    assert cfg.start == "2024-01"
    assert cfg.end == "2024-06"
    assert cfg.granularity is Granularity.DAILY
    assert cfg.currency.code == "JPY"
    assert cfg.currency.decimals == 0
    assert cfg.today == date(2024, 3, 15)
    assert cfg.source == str(path)


def test_load_json_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "report.json",
        json.dumps({"start": "2024-01-20", "end": "2024-02", "decimals": 3}),
    )
    cfg = load_report_config(path)

    assert cfg.start == "2024-01"
    assert cfg.granularity is Granularity.MONTHLY
    assert cfg.currency.code == "USD"
    assert cfg.currency.decimals == 3


def test_yaml_dates_reduce_to_months() -> None:
    cfg = load_report_config({"start": date(2024, 5, 9), "end": "2024-05"})
    assert cfg.start == "2024-05"


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    cfg = load_report_config(_write(tmp_path, "empty.yml", ""))
    assert cfg.start is None
    assert cfg.granularity is Granularity.MONTHLY


@pytest.mark.parametrize(
    "mapping, match",
    [
        ({"start": "2024-13"}, "start"),
        ({"granularity": "weekly"}, "granularity"),
        ({"colour": "blue"}, "unknown keys"),
        ({"decimals": -2}, "decimals"),
        ({"decimals": True}, "decimals"),
        ({"today": "yesterday"}, "today"),
        ({"currency": ""}, "currency"),
    ],
)
def test_invalid_values(mapping, match) -> None:
    with pytest.raises(ConfigError, match=match):
        load_report_config(mapping)


def test_unsupported_format(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unsupported"):
        load_report_config(_write(tmp_path, "report.toml", "start = 1"))


def test_root_must_be_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="mapping"):
        load_report_config(_write(tmp_path, "report.yaml", "- 2024-01\n"))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_report_config(tmp_path / "nope.yaml")


def test_merged_overrides_only_given_values() -> None:
    base = ReportConfig(start="2024-01", end="2024-03")
    merged = base.merged(end="2024-06", granularity=None)

    assert merged.start == "2024-01"
    assert merged.end == "2024-06"
    assert merged.granularity is Granularity.MONTHLY
