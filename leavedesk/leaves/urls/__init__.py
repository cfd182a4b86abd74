# leaves/urls/__init__.py
from django.urls import path, include

urlpatterns = [
    path("", include("leaves.urls.leave_urls")),
]
