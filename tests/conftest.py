import copy

import pytest

from topic_tutor.catalog import build_catalog


SAMPLE_CATALOG = {
    "categories": [
        {
            "id": "core",
            "title": "Core",
            "glyph": "*",
            "topics": [
                {
                    "id": "A",
                    "title": "Variables",
                    "description": "Names and binding",
                    "difficulty": "Beginner",
                    "examples": [{"title": "Assignment", "code": "x = 1"}],
                },
                {
                    "id": "B",
                    "title": "Loops",
                    "description": "for and while",
                    "examples": [{"title": "Counting", "code": "for i in range(3): print(i)"}],
                },
                {
                    "id": "C",
                    "title": "Metaclasses",
                    "description": "Classes that build classes",
                    "difficulty": "advanced",
                    "examples": [{"title": "type()", "code": "Meta = type('Meta', (type,), {})"}],
                },
            ],
        },
        {
            "id": "adv",
            "title": "Advanced",
            "topics": [
                {"id": "D", "title": "Descriptors", "description": "Attribute hooks", "difficulty": "Advanced"},
            ],
        },
    ]
}


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


@pytest.fixture
def sample_catalog():
    return build_catalog(SAMPLE_CATALOG)


@pytest.fixture
def sample_raw():
    return copy.deepcopy(SAMPLE_CATALOG)
