from django.apps import AppConfig


class HousingConfig(AppConfig):
    name = 'apps.housing'
    label = 'housing'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        from shared.application.message_bus import message_bus

        from .application.command_handlers import register_handlers

        register_handlers(message_bus)
