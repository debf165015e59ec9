# -*- coding: utf-8 -*-
# publishers/forms.py

from __future__ import annotations

from django import forms

from publishers.models import Publisher, Target


_TEXT_SM = forms.TextInput(attrs={"class": "form-control form-control-sm"})
_SELECT_SM = forms.Select(attrs={"class": "form-select form-select-sm"})
_NUMBER_SM = forms.NumberInput(attrs={"class": "form-control form-control-sm", "min": "0"})


class PublisherForm(forms.ModelForm):
    class Meta:
        model = Publisher
        fields = ("name", "segment_description")
        widgets = {
            "name": _TEXT_SM,
            "segment_description": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
        }
        error_messages = {"name": {"required": "Nama penerbit wajib diisi."}}


class TargetForm(forms.ModelForm):
    class Meta:
        model = Target
        fields = ("publisher", "category", "target_type", "year", "month", "amount")
        widgets = {
            "publisher": _SELECT_SM,
            "category": _SELECT_SM,
            "target_type": _SELECT_SM,
            "year": _NUMBER_SM,
            "month": _NUMBER_SM,
            "amount": _NUMBER_SM,
        }

    def clean(self):
        cleaned = super().clean()
        ttype = cleaned.get("target_type")
        month = cleaned.get("month")

        if ttype == Target.Type.MONTHLY and not month:
            self.add_error("month", "Bulan wajib diisi untuk target bulanan.")
        if ttype == Target.Type.ANNUAL:
            cleaned["month"] = None

        # SQLite/Postgres treat NULL months as distinct, so annual duplicates need a manual check.
        publisher = cleaned.get("publisher")
        year = cleaned.get("year")
        category = cleaned.get("category")
        if publisher and year and ttype and category:
            clash = Target.objects.filter(
                publisher=publisher,
                category=category,
                target_type=ttype,
                year=year,
                month=cleaned.get("month"),
            )
            if self.instance.pk:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise forms.ValidationError("Target untuk periode ini sudah ada.")
        return cleaned
