# -*- coding: utf-8 -*-
# analytics/views.py

from __future__ import annotations

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render

from accounts.models import Role
from accounts.services_roles import role_required
from analytics.services import build_analytics

_staff = role_required(Role.Name.MANAGER, Role.Name.EDITOR)


def _payload(request):
    warning_days = int(getattr(settings, "PRESSROOM_DEADLINE_WARNING_DAYS", 7))
    return build_analytics(request.user, warning_days=warning_days)


@_staff
def analytics_page(request):
    return render(request, "analytics/analytics.html", {"data": _payload(request)})


@_staff
def analytics_data(request):
    """Chart feed for the analytics page."""
    return JsonResponse(_payload(request))
