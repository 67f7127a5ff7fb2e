# game/urls.py
from django.urls import path, re_path

from .views import FrontendView, HealthView, MoveView

urlpatterns = [
    path("health/", HealthView.as_view(), name="health"),
    re_path(r"^move/?$", MoveView.as_view(), name="move"),
]

frontend_urlpatterns = [
    re_path(r"^(?P<path>.*)$", FrontendView.as_view(), name="frontend"),
]
