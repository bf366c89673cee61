"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("api/chart-types/", views.chart_types_api, name="chart_types_api"),
    path("api/widgets/validate/", views.validate_widget_api, name="validate_widget_api"),
    path("api/widgets/render/", views.render_widget_api, name="render_widget_api"),
    path("api/report-filters/regions/", views.region_options_api, name="region_options_api"),
]
