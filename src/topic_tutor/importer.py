"""Load catalog definitions from JSON or YAML files."""
import json
import logging
from pathlib import Path

from topic_tutor.catalog import CatalogError, CatalogIndex, build_catalog

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def read_catalog_source(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise CatalogError(
            f"Unsupported catalog format '{suffix}' (expected one of {', '.join(SUPPORTED_SUFFIXES)})"
        )

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"{path.name}: cannot read catalog ({e})") from e

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{path.name}: invalid JSON ({e})") from e
    else:
        import yaml
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CatalogError(f"{path.name}: invalid YAML ({e})") from e
    if not isinstance(data, dict):
        raise CatalogError(f"{path.name}: catalog root must be a mapping")
    return data


def load_catalog_file(file_path: str, default_key: str | None = None) -> CatalogIndex:
    """Read and index a catalog file. Raises CatalogError on malformed content."""
    catalog = build_catalog(read_catalog_source(file_path), default_key=default_key)
    logger.info("Loaded catalog %s (%d topics)", Path(file_path).name, catalog.topic_count())
    return catalog
