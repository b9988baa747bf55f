"""Django app configuration for branding."""

from django.apps import AppConfig


class BrandingConfig(AppConfig):
    """Storefront logo lookup."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "branding"
