# -*- coding: utf-8 -*-
# production/forms.py

from __future__ import annotations

from django import forms

from manuscripts.forms import pic_candidates
from production.models import MasterTask, TaskProgress


_TEXT_SM = forms.TextInput(attrs={"class": "form-control form-control-sm"})
_NUMBER_SM = forms.NumberInput(attrs={"class": "form-control form-control-sm", "min": "1"})
_SELECT_SM = forms.Select(attrs={"class": "form-select form-select-sm"})
_DATE = forms.DateInput(attrs={"class": "form-control form-control-sm", "type": "date"}, format="%Y-%m-%d")


class MasterTaskForm(forms.ModelForm):
    class Meta:
        model = MasterTask
        fields = ("name", "estimated_days")
        widgets = {"name": _TEXT_SM, "estimated_days": _NUMBER_SM}
        error_messages = {"name": {"required": "Nama tugas wajib diisi."}}


class TaskProgressForm(forms.ModelForm):
    class Meta:
        model = TaskProgress
        fields = ("status", "pic", "deadline", "notes")
        widgets = {
            "status": _SELECT_SM,
            "pic": _SELECT_SM,
            "deadline": _DATE,
            "notes": forms.Textarea(attrs={"class": "form-control form-control-sm", "rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["pic"].queryset = pic_candidates()
        self.fields["pic"].required = False
        self.fields["pic"].label_from_instance = lambda u: u.display_name()
