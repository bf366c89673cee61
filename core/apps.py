"""App configuration for the widget rendering app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (widget JSON endpoints and commands)."""

    name = "core"
    verbose_name = "Dashboard widgets"
