"""Bundled catalog shipped with the package."""
from pathlib import Path

from topic_tutor.catalog import CatalogIndex
from topic_tutor.importer import load_catalog_file

CONTENT_DIR = Path(__file__).parent / "content"
BUNDLED_CATALOG = CONTENT_DIR / "catalog.json"


def load_bundled_catalog() -> CatalogIndex:
    """Load the catalog in content/catalog.json."""
    return load_catalog_file(str(BUNDLED_CATALOG))
