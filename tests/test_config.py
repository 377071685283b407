from __future__ import annotations

from pathlib import Path

import pytest

from schemagraph.config.load import load_settings
from schemagraph.config.model import EnumHandling, GeneratorSettings
from schemagraph.errors import ConfigError
from schemagraph.events import DocumentParsed, TypeShapeUnsupported
from schemagraph.schema import SchemaDialect


def test_load_settings_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "schemagraph.yaml"
    path.write_text(
        "enum_handling: value\nreference_types_nullable: false\ndialect: swagger2\nstrict: true\n",
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.enum_handling is EnumHandling.VALUE
    assert settings.reference_types_nullable is False
    assert settings.dialect is SchemaDialect.SWAGGER2
    assert settings.strict is True
    assert settings.strict_objects is True


def test_load_settings_defaults(tmp_path: Path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    assert load_settings(empty) == GeneratorSettings()
    assert load_settings(tmp_path / "absent.yaml", required=False) == GeneratorSettings()


def test_load_settings_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Missing settings"):
        load_settings(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- a\n- b\n", "YAML mapping"),
        ("unknown_option: 1\n", "unknown_option"),
        ("enum_handling: ordinal\n", "enum_handling"),
        ("a: [", "Failed to parse YAML"),
    ],
)
def test_load_settings_rejects_bad_documents(tmp_path: Path, text: str, message: str) -> None:
    path = tmp_path / "schemagraph.yaml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_settings(path)


def test_events_serialize_to_dicts() -> None:
    event = DocumentParsed(base_uri="file:///a.json", references=3, unresolved=1)
    warning = TypeShapeUnsupported(type_name="Thing", member="field", message="no kind")

    payload = event.to_dict()

    assert payload["type"] == "DocumentParsed"
    assert payload["level"] == "INFO"
    assert payload["references"] == 3
    assert warning.to_dict()["level"] == "WARNING"
    assert warning.to_dict()["member"] == "field"
