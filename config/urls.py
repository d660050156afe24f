"""URL configuration for the sales store.

Only the Django admin is exposed over HTTP; the sales service itself is a
library-level API.
"""
from django.contrib import admin  # type: ignore
from django.urls import path  # type: ignore

urlpatterns = [
    path('admin/', admin.site.urls),
]
