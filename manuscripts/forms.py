# -*- coding: utf-8 -*-
# manuscripts/forms.py

from __future__ import annotations

from django import forms
from django.contrib.auth import get_user_model
from django.db.models import Q
from django.utils import timezone

from accounts.models import Role
from manuscripts.services_approval import MIN_REJECT_REASON
from publishers.models import Publisher


_SELECT_SM = forms.Select(attrs={"class": "form-select form-select-sm"})
_TEXTAREA = forms.Textarea(attrs={"class": "form-control", "rows": 3})
_DATE = forms.DateInput(attrs={"class": "form-control form-control-sm", "type": "date"}, format="%Y-%m-%d")


def pic_candidates():
    """Managers and editors may own a book."""
    User = get_user_model()
    return (
        User.objects
        .filter(is_active=True)
        .filter(
            Q(user_roles__role__name__in=[Role.Name.MANAGER, Role.Name.EDITOR])
            | Q(is_superuser=True)
        )
        .distinct()
        .order_by("full_name", "username")
    )


class ApproveManuscriptForm(forms.Form):
    publisher = forms.ModelChoiceField(
        queryset=Publisher.objects.order_by("name"),
        widget=_SELECT_SM,
        error_messages={"required": "Penerbit wajib dipilih."},
    )
    pic = forms.ModelChoiceField(
        queryset=None,
        widget=_SELECT_SM,
        error_messages={"required": "PIC wajib dipilih."},
    )
    note = forms.CharField(required=False, widget=_TEXTAREA)
    target_print_date = forms.DateField(
        widget=_DATE,
        error_messages={"required": "Target naik cetak wajib diisi."},
    )

    def __init__(self, *args, manuscript=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["pic"].queryset = pic_candidates()
        self.fields["pic"].label_from_instance = lambda u: u.display_name()
        if manuscript is not None and not self.is_bound:
            first = manuscript.target_publishers.order_by("priority").first()
            if first:
                self.initial.setdefault("publisher", first.publisher_id)

    def clean_target_print_date(self):
        value = self.cleaned_data["target_print_date"]
        if value <= timezone.localdate():
            raise forms.ValidationError("Target naik cetak harus setelah hari ini.")
        return value


class RejectManuscriptForm(forms.Form):
    reason = forms.CharField(
        min_length=MIN_REJECT_REASON,
        widget=_TEXTAREA,
        error_messages={
            "required": "Alasan penolakan wajib diisi.",
            "min_length": "Alasan penolakan minimal 10 karakter.",
        },
    )


class ApprovalFilterForm(forms.Form):
    status = forms.ChoiceField(required=False, widget=_SELECT_SM)
    search = forms.CharField(required=False, widget=forms.TextInput(attrs={"class": "form-control form-control-sm"}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        from manuscripts.models import Manuscript

        self.fields["status"].choices = [("all", "Semua")] + list(Manuscript.Status.choices)
