# File: tests/conftest.py
# Configures an in-memory Django project for the test session.

import django
import pytest
from django.conf import settings

from ts_auto_generator.config_validation import GeneratorConfig


# --- Django Settings ---
# The fixture app lives in tests/blog_app; no database access ever happens.
TEST_SETTINGS = {
    "INSTALLED_APPS": [
        "django.contrib.contenttypes",
        "tests.blog_app",
    ],
    "DATABASES": {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    },
    "DEFAULT_AUTO_FIELD": "django.db.models.AutoField",
    "USE_TZ": True,
}

VALUE_OBJECT_MODULE = "tests.blog_app.data_objects"


def pytest_configure(config):
    if not settings.configured:
        settings.configure(**TEST_SETTINGS)
    django.setup()


# --- Fixtures ---
@pytest.fixture
def blog_config(tmp_path) -> GeneratorConfig:
    """Configuration for the fixture app writing into a temporary directory."""
    return GeneratorConfig(
        output_path=str(tmp_path / "types" / "interfaces.ts"),
        app_labels=["blog_app"],
        value_object_modules=[VALUE_OBJECT_MODULE],
    )
