from django.contrib import admin

from .models import UiBranding


@admin.register(UiBranding)
class UiBrandingAdmin(admin.ModelAdmin):
    list_display = ("id", "logo_url", "updated_at")
