from django.apps import AppConfig


class FestivalsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "festivals"

    def ready(self) -> None:
        from festivals import signals  # noqa: F401
