from django.apps import AppConfig


class StockroomConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'stockroom'
    verbose_name = 'Stockroom'

    def ready(self):
        import stockroom.signals  # noqa
