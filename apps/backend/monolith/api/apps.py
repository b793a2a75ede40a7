import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class ApiConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'api'
    verbose_name = 'Adventy API'

    def ready(self):
        """
        Load the content calendar and validate the campaign window once,
        before any request is served. A broken configuration stops startup.
        """
        from api.application.advent_gate.wiring import (
            get_adventure_repository,
            get_campaign_window,
        )

        window = get_campaign_window()
        repository = get_adventure_repository()

        unmapped = [day.isoformat() for day in window.days() if repository.lookup(day) is None]
        if unmapped:
            logger.warning(f"Campaign days without adventure: {', '.join(unmapped)}")
