import logging
import os
import sys
from typing import Optional

import django
from django.apps import apps
from django.conf import settings

from ..exceptions import ConfigurationError


logger = logging.getLogger(__name__)

# --- Django Setup Helper ---
_django_setup_done = False


def setup_django(settings_module: Optional[str] = None) -> None:
    """
    Load the project's Django settings and populate the app registry.

    Args:
        settings_module: Dotted settings module; falls back to the
            DJANGO_SETTINGS_MODULE environment variable

    Raises:
        ConfigurationError: If no settings are available or setup fails
    """
    global _django_setup_done
    if _django_setup_done or apps.ready:
        logger.debug("Django setup already performed.")
        _django_setup_done = True
        return

    if settings_module:
        os.environ["DJANGO_SETTINGS_MODULE"] = settings_module
    elif not settings.configured and not os.environ.get("DJANGO_SETTINGS_MODULE"):
        raise ConfigurationError(
            "No Django settings available",
            suggestions=[
                "Set settings_module in the configuration file",
                "Export DJANGO_SETTINGS_MODULE before running the generator",
            ],
        )

    # Settings modules are resolved relative to the project root, as manage.py does
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    logger.info("Loading Django settings...")
    try:
        django.setup()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to set up Django: {e}",
            context={"settings_module": os.environ.get("DJANGO_SETTINGS_MODULE")},
        ) from e
    _django_setup_done = True
    logger.info("Django setup complete.")
