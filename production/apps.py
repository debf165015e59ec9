# -*- coding: utf-8 -*-
# production/apps.py

from __future__ import annotations

from django.apps import AppConfig


class ProductionConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "production"
    verbose_name = "Produksi"
