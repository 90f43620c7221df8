import logging
from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core (Settings)'

    def ready(self):
        from django.db import connections
        for alias in ('default', 'offline'):
            try:
                logger.info('DB[%s]=%s', alias, connections[alias].vendor)
            except Exception as e:
                logger.warning('DB[%s] not configured: %s', alias, e)
