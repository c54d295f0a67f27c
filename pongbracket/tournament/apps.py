from django.apps import AppConfig


class TournamentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pongbracket.tournament'
    verbose_name = 'Pong Tournaments'
