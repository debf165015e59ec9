# -*- coding: utf-8 -*-
# manuscripts/apps.py

from __future__ import annotations

from django.apps import AppConfig


class ManuscriptsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "manuscripts"
    verbose_name = "Naskah"
