from django.apps import AppConfig


class LogConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'log'
    verbose_name = 'Change feed'

    def ready(self):
        from . import signals  # noqa: F401
