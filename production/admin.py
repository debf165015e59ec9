# production/admin.py
# -*- coding: utf-8 -*-

from django.contrib import admin

from production.models import Book, MasterTask, TaskProgress


@admin.register(MasterTask)
class MasterTaskAdmin(admin.ModelAdmin):
    list_display = ("order", "name", "estimated_days")
    ordering = ("order", "id")


class TaskProgressInline(admin.TabularInline):
    model = TaskProgress
    extra = 0
    fields = ("task", "pic", "status", "started_on", "deadline", "completed_on")


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ("title", "publisher", "pic", "status", "target_print_date", "actual_print_date")
    list_filter = ("status", "publisher")
    search_fields = ("title",)
    inlines = [TaskProgressInline]
