from pathlib import Path
import json

from factor_reports.infrastructure.storage.mapping_store import load_mapping, save_mapping


def test_save_and_load_mapping(tmp_path: Path):
    path = tmp_path / "client_country_override.json"
    merged = save_mapping({" ab12 ": " Brazil "}, path=path)
    assert merged["AB12"] == "Brazil"
    assert merged["01A2"] == "Morocco"
    assert json.loads(path.read_text()) == {"AB12": "Brazil"}

    loaded = load_mapping(path=path)
    assert loaded["AB12"] == "Brazil"


def test_override_replaces_bundled_entry(tmp_path: Path):
    path = tmp_path / "client_country_override.json"
    path.write_text(json.dumps({"01a2": "Tunisia"}), encoding="utf-8")

    assert load_mapping(path=path)["01A2"] == "Tunisia"


def test_missing_or_corrupt_override_falls_back_to_bundled(tmp_path: Path):
    missing = tmp_path / "missing.json"
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")

    assert load_mapping(path=missing)["0146"] == "Chile"
    assert load_mapping(path=corrupt)["0146"] == "Chile"
