from django.urls import path

from .views import LogoView

app_name = "branding"

urlpatterns = [
    path("logo/", LogoView.as_view(), name="logo"),
]
