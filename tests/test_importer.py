# tests/test_importer.py
import json

import pytest

from topic_tutor.catalog import CatalogError
from topic_tutor.importer import read_catalog_source, load_catalog_file


def test_read_json_file(tmp_path, sample_raw):
    f = tmp_path / "catalog.json"
    f.write_text(json.dumps(sample_raw))
    data = read_catalog_source(str(f))
    assert data["categories"][0]["id"] == "core"


def test_read_yaml_file(tmp_path):
    f = tmp_path / "catalog.yaml"
    f.write_text(
        "categories:\n"
        "  - id: web\n"
        "    title: Web\n"
        "    topics:\n"
        "      - id: http\n"
        "        title: HTTP Basics\n"
        "        difficulty: Intermediate\n"
    )
    catalog = load_catalog_file(str(f))
    assert catalog.topic("http").difficulty == "intermediate"
    assert catalog.default_category.key == "web"


def test_yml_suffix_is_accepted(tmp_path):
    f = tmp_path / "catalog.yml"
    f.write_text("categories:\n  - id: only\n")
    assert load_catalog_file(str(f)).category("x").key == "only"


def test_load_json_catalog(tmp_path, sample_raw):
    f = tmp_path / "catalog.json"
    f.write_text(json.dumps(sample_raw))
    catalog = load_catalog_file(str(f), default_key="adv")
    assert catalog.topic_count() == 4
    assert catalog.default_category.key == "adv"


def test_unsupported_format(tmp_path):
    f = tmp_path / "catalog.txt"
    f.write_text("categories")
    with pytest.raises(CatalogError, match="Unsupported"):
        read_catalog_source(str(f))


def test_non_mapping_root(tmp_path):
    f = tmp_path / "catalog.json"
    f.write_text("[1, 2, 3]")
    with pytest.raises(CatalogError):
        read_catalog_source(str(f))


def test_malformed_topic_in_file(tmp_path):
    f = tmp_path / "catalog.json"
    f.write_text(json.dumps({"categories": [{"id": "c", "topics": [{"id": "t"}]}]}))
    with pytest.raises(CatalogError):
        load_catalog_file(str(f))


def test_invalid_json_is_catalog_error(tmp_path):
    f = tmp_path / "catalog.json"
    f.write_text("{not json")
    with pytest.raises(CatalogError, match="invalid JSON"):
        load_catalog_file(str(f))


def test_invalid_yaml_is_catalog_error(tmp_path):
    f = tmp_path / "catalog.yaml"
    f.write_text("categories: [unclosed\n  - id: x\n")
    with pytest.raises(CatalogError, match="invalid YAML"):
        load_catalog_file(str(f))


def test_missing_file_is_catalog_error(tmp_path):
    with pytest.raises(CatalogError, match="cannot read"):
        load_catalog_file(str(tmp_path / "nope.json"))
