"""App configuration for the classroom Django app."""

from __future__ import annotations

from django.apps import AppConfig


class ClassroomConfig(AppConfig):
    """Configuration for the `classroom` app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "classroom"
    verbose_name = "Carts & Mass classroom"
