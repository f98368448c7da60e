from django.apps import AppConfig


class GoalsConfig(AppConfig):
    name = 'goals'
    verbose_name = 'Goals'
