# manuscripts/admin.py
# -*- coding: utf-8 -*-

from django.contrib import admin

from manuscripts.models import Author, Manuscript, ManuscriptAuthor, ManuscriptTargetPublisher


class ManuscriptAuthorInline(admin.TabularInline):
    model = ManuscriptAuthor
    extra = 0
    autocomplete_fields = ("author",)


class ManuscriptTargetPublisherInline(admin.TabularInline):
    model = ManuscriptTargetPublisher
    extra = 0


@admin.register(Manuscript)
class ManuscriptAdmin(admin.ModelAdmin):
    list_display = ("title", "submitted_by", "genre", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "submitted_by__username", "submitted_by__full_name")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [ManuscriptAuthorInline, ManuscriptTargetPublisherInline]


@admin.register(Author)
class AuthorAdmin(admin.ModelAdmin):
    list_display = ("full_name", "email", "user")
    search_fields = ("full_name", "email", "nik")
