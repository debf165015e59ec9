# -*- coding: utf-8 -*-
# analytics/urls.py

from django.urls import path

from analytics import views

app_name = "analytics"

urlpatterns = [
    path("", views.analytics_page, name="page"),
    path("data/", views.analytics_data, name="data"),
]
