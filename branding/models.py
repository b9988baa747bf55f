from django.db import models


class UiBranding(models.Model):
    """Remote branding settings. Only the first row is used."""

    logo_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "UI branding"
        verbose_name_plural = "UI branding"

    def __str__(self) -> str:  # pragma: no cover
        return self.logo_url or f"UiBranding#{self.pk}"

    def save(self, *args, **kwargs):
        from .services import logo_cache

        super().save(*args, **kwargs)
        logo_cache.invalidate()

    def delete(self, *args, **kwargs):
        from .services import logo_cache

        result = super().delete(*args, **kwargs)
        logo_cache.invalidate()
        return result
