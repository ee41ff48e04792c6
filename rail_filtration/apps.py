"""
Django app configuration for rail-filtration.

Registers the ``like``/``ilike`` lookups and validates the
``RAIL_FILTRATION`` settings at startup.
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for rail-filtration."""

    name = "rail_filtration"
    verbose_name = "Rail Filtration"
    label = "rail_filtration"

    def ready(self):
        from . import lookups  # noqa: F401
        from .conf.settings import check_settings

        config = check_settings()
        logger.info(
            "Rail filtration initialized",
            extra={"parameters": config.parameters},
        )
