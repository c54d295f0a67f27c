from django.apps import AppConfig


class BracketCoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pongbracket.bracket_core'
    verbose_name = 'Bracket Core Logic'
