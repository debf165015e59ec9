# -*- coding: utf-8 -*-
# accounts/forms.py

from __future__ import annotations

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction

from accounts.models import Role
from accounts.services_roles import role_names, set_user_roles


_TEXT_SM = forms.TextInput(attrs={"class": "form-control form-control-sm"})
_EMAIL_SM = forms.EmailInput(attrs={"class": "form-control form-control-sm"})
_PASSWORD_SM = forms.PasswordInput(attrs={"class": "form-control form-control-sm"})
_CHECKS = forms.CheckboxSelectMultiple(attrs={"class": "form-check-input"})


class _UserBaseForm(forms.Form):
    """
    Shared by user management (authors/translators only) and team management
    (any role). `allowed_roles` limits the role checkboxes.
    """

    full_name = forms.CharField(
        max_length=255,
        widget=_TEXT_SM,
        error_messages={"required": "Nama lengkap wajib diisi."},
    )
    email = forms.EmailField(
        max_length=255,
        widget=_EMAIL_SM,
        error_messages={"required": "Email wajib diisi.", "invalid": "Format email tidak valid."},
    )
    roles = forms.MultipleChoiceField(required=False, widget=_CHECKS)

    def __init__(self, *args, allowed_roles=None, instance=None, **kwargs):
        self.instance = instance
        self.allowed_roles = tuple(allowed_roles or Role.Name.values)
        super().__init__(*args, **kwargs)
        self.fields["roles"].choices = [
            (value, label) for value, label in Role.Name.choices if value in self.allowed_roles
        ]

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        qs = get_user_model().objects.filter(email__iexact=email)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise forms.ValidationError("Email sudah terdaftar.")
        return email


class UserCreateForm(_UserBaseForm):
    password = forms.CharField(widget=_PASSWORD_SM, error_messages={"required": "Password wajib diisi."})
    password_confirmation = forms.CharField(widget=_PASSWORD_SM, label="Konfirmasi password")

    def clean(self):
        cleaned = super().clean()
        pw = cleaned.get("password")
        confirm = cleaned.get("password_confirmation")
        if pw and pw != confirm:
            self.add_error("password_confirmation", "Konfirmasi password tidak cocok.")
        elif pw:
            try:
                validate_password(pw)
            except forms.ValidationError as exc:
                self.add_error("password", exc)
        return cleaned

    @transaction.atomic
    def save(self):
        cd = self.cleaned_data
        user = get_user_model().objects.create_user(
            username=cd["email"],
            email=cd["email"],
            password=cd["password"],
            full_name=cd["full_name"],
        )
        set_user_roles(user, cd.get("roles") or [], allowed=self.allowed_roles)
        return user


class UserUpdateForm(_UserBaseForm):
    @transaction.atomic
    def save(self):
        cd = self.cleaned_data
        user = self.instance
        user.full_name = cd["full_name"]
        user.email = cd["email"]
        user.save(update_fields=["full_name", "email"])
        # roles this screen cannot assign are left as they are
        kept = [n for n in role_names(user) if n not in self.allowed_roles]
        set_user_roles(user, list(cd.get("roles") or []) + kept)
        return user
