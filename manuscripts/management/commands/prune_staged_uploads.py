# -*- coding: utf-8 -*-
# manuscripts/management/commands/prune_staged_uploads.py
# Purpose:
# Remove wizard uploads left behind by sessions that never confirmed.
# Notes:
# - Default age is the session cookie age; an older staged file has no
#   session left that could still submit it.

from __future__ import annotations

import datetime as dt

from django.conf import settings
from django.core.management.base import BaseCommand

from manuscripts.services_submission import prune_staged


class Command(BaseCommand):
    help = "Delete staged manuscript uploads older than the session age"

    def add_arguments(self, parser):
        parser.add_argument(
            "--hours",
            type=int,
            default=None,
            help="Age limit in hours (default: SESSION_COOKIE_AGE)",
        )

    def handle(self, *args, **options):
        hours = options["hours"]
        if hours is None:
            max_age = dt.timedelta(seconds=settings.SESSION_COOKIE_AGE)
        else:
            max_age = dt.timedelta(hours=hours)

        removed = prune_staged(max_age)
        self.stdout.write(self.style.SUCCESS(f"{removed} staged upload(s) removed"))
