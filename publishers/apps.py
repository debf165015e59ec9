# -*- coding: utf-8 -*-
# publishers/apps.py

from __future__ import annotations

from django.apps import AppConfig


class PublishersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "publishers"
    verbose_name = "Penerbit"
