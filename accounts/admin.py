# accounts/admin.py
# -*- coding: utf-8 -*-

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin

from accounts.models import Role, UserProfile, UserRole

User = get_user_model()


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    extra = 0


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    """
    User admin (identity).

    Identity lives here (username/email/password/staff flags).
    Application authority (MANAGER/EDITOR/AUTHOR/TRANSLATOR) is managed via UserRole.
    """

    list_display = ("username", "email", "full_name", "publisher", "is_superuser", "is_active", "last_login")
    list_filter = ("is_active", "is_superuser", "publisher")
    search_fields = ("username", "email", "full_name")
    ordering = ("username",)

    fieldsets = (
        (None, {"fields": ("username", "email", "password")}),
        ("Personal info", {"fields": ("full_name", "first_name", "last_name", "publisher")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("username", "email", "full_name", "password1", "password2"),
        }),
    )

    inlines = [UserRoleInline, UserProfileInline]


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    """
    Role taxonomy: MANAGER / EDITOR / AUTHOR / TRANSLATOR
    """
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "created_at")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email")
    autocomplete_fields = ("user", "role")
