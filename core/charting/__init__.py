"""Declarative widget configuration and rendering helpers.

Widgets in the builder preview and the viewer are driven by `WidgetConfig`
objects rather than per-page chart logic. This package contains the schema,
the JSON codec, and the rendering utilities used by the widget endpoints.
"""
