# publishers/admin.py
# -*- coding: utf-8 -*-

from django.contrib import admin

from publishers.models import Publisher, Target


class TargetInline(admin.TabularInline):
    model = Target
    extra = 0


@admin.register(Publisher)
class PublisherAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)
    inlines = [TargetInline]


@admin.register(Target)
class TargetAdmin(admin.ModelAdmin):
    list_display = ("publisher", "category", "target_type", "year", "month", "amount")
    list_filter = ("category", "target_type", "year")
