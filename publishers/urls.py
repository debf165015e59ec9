# -*- coding: utf-8 -*-
# publishers/urls.py

from django.urls import path

from publishers import views

app_name = "publishers"

urlpatterns = [
    path("", views.publisher_list, name="list"),
    path("new/", views.publisher_create, name="create"),
    path("<int:publisher_id>/edit/", views.publisher_edit, name="edit"),
    path("<int:publisher_id>/delete/", views.publisher_delete, name="delete"),

    path("targets/", views.target_list, name="targets"),
    path("targets/new/", views.target_create, name="target_create"),
    path("targets/<int:target_id>/delete/", views.target_delete, name="target_delete"),
]
