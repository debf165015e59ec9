# -*- coding: utf-8 -*-
# accounts/urls.py
from __future__ import annotations

from django.contrib.auth import views as auth_views
from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    # Auth
    path("", auth_views.LoginView.as_view(template_name="accounts/login.html"), name="login"),
    path("logout/", auth_views.LogoutView.as_view(next_page="accounts:login"), name="logout"),

    # Dashboard
    path("dashboard/", views.dashboard, name="dashboard"),

    # User management (authors / translators)
    path("users/", views.user_list, name="user_list"),
    path("users/new/", views.user_create, name="user_create"),
    path("users/<int:user_id>/edit/", views.user_update, name="user_update"),
    path("users/<int:user_id>/delete/", views.user_delete, name="user_delete"),

    # Team management (all roles)
    path("team/", views.team_list, name="team_list"),
    path("team/new/", views.team_create, name="team_create"),
    path("team/<int:user_id>/edit/", views.team_update, name="team_update"),
    path("team/<int:user_id>/delete/", views.team_delete, name="team_delete"),
]
