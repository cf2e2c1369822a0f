import logging
from typing import Iterable, List, Optional

from django.apps import apps
from django.db import models
from django.utils.module_loading import import_string

from ..domain.diagnostics import Diagnostics, Stage
from ..domain.naming import qualified_name
from ..exceptions import ModelDiscoveryError


logger = logging.getLogger(__name__)

FRAMEWORK_APP_PREFIX = "django."


class ModelDiscovery:
    """
    Enumerates the model classes to generate interfaces for.

    Models come from the configured app labels (every installed app outside
    ``django.*`` when none are given) followed by the additional dotted
    model paths. The order is stable: app order, then model registration
    order, then the additional paths as listed.
    """

    def __init__(
        self,
        app_labels: Optional[Iterable[str]] = None,
        additional_models: Optional[Iterable[str]] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.app_labels = list(app_labels or [])
        self.additional_models = list(additional_models or [])
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def discover(self) -> List[type]:
        """Return the discovered model classes without duplicates."""
        discovered: List[type] = []

        for app_config in self._app_configs():
            for model in app_config.get_models():
                if self._is_concrete(model) and model not in discovered:
                    discovered.append(model)

        for path in self.additional_models:
            try:
                model = self._load_model(path)
            except ModelDiscoveryError as e:
                self.diagnostics.skip(Stage.DISCOVERY, path, e.message, level=logging.WARNING)
                continue
            if model not in discovered:
                discovered.append(model)

        logger.info(f"Found {len(discovered)} models")
        return discovered

    def _app_configs(self) -> list:
        if not self.app_labels:
            return [
                app_config
                for app_config in apps.get_app_configs()
                if not app_config.name.startswith(FRAMEWORK_APP_PREFIX)
            ]

        configs = []
        for label in self.app_labels:
            try:
                configs.append(apps.get_app_config(label))
            except LookupError:
                self.diagnostics.skip(
                    Stage.DISCOVERY, label, "app label is not installed", level=logging.WARNING
                )
        return configs

    @staticmethod
    def _is_concrete(model: type) -> bool:
        meta = model._meta
        return not meta.abstract and not meta.swapped

    def _load_model(self, path: str) -> type:
        try:
            model = import_string(path)
        except ImportError as e:
            raise ModelDiscoveryError(f"Cannot import {path}: {e}", model=path) from e

        if not isinstance(model, type) or not issubclass(model, models.Model):
            raise ModelDiscoveryError(f"{path} is not a Django model", model=path)
        if not self._is_concrete(model):
            raise ModelDiscoveryError(
                f"{qualified_name(model)} is abstract or swapped out", model=path
            )
        return model
