# QTTT/urls.py
from django.urls import include, path

from game.urls import frontend_urlpatterns

urlpatterns = [
    path("api/", include("game.urls")),
    *frontend_urlpatterns,
]
