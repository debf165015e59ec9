# -*- coding: utf-8 -*-
# accounts/management/commands/seed_initial_data.py
# Purpose:
# Seed minimal, safe initial data for local development and prototypes.
# Notes:
# - Idempotent (safe to run multiple times)
# - Conservative (no destructive actions)
# - Explicit (no hidden side effects)

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from accounts.models import Role, UserRole
from production.models import MasterTask
from publishers.models import Publisher


PUBLISHERS = [
    ("Gramedia Pustaka Utama", "Fiksi & Non-Fiksi Umum"),
    ("Elex Media Komputindo", "Teknologi & Programming"),
    ("Penerbit Erlangga", "Pendidikan & Akademik"),
    ("Mizan Pustaka", "Agama & Spiritual"),
    ("Kompas Media Nusantara", "Berita & Jurnalistik"),
]

MASTER_TASKS = [
    "Cover Design",
    "Pengantar & Endors",
    "Editing Naskah",
    "Draf PK & Peta Buku",
    "Layout",
    "Desain Peta Buku",
    "Print & Proofread Awal",
    "QC Isi & ACC Kover Final",
    "Finishing Produksi",
    "SPH",
    "PK Final",
    "Cetak Awal Dummy",
    "Proofread Akhir",
    "Input Akhir",
    "Cetak Dummy Digital Printing (opsional)",
    "Naik Cetak",
    "Turun Cetak",
]


class Command(BaseCommand):
    """
    Seeds:
    1. Roles (MANAGER / EDITOR / AUTHOR / TRANSLATOR)
    2. A local admin user (dev only) holding MANAGER
    3. The production pipeline (master tasks, in order)
    4. Sample publishers
    """

    help = "Seed roles, admin user, master tasks and sample publishers"

    def handle(self, *args, **options):
        User = get_user_model()

        # --------------------------------------------------
        # 1) Roles
        # --------------------------------------------------
        for name in Role.Name.values:
            Role.objects.get_or_create(name=name)
        self.stdout.write(self.style.SUCCESS("Roles ensured (MANAGER / EDITOR / AUTHOR / TRANSLATOR)"))

        # --------------------------------------------------
        # 2) Admin user (development only)
        # --------------------------------------------------
        admin_user, created = User.objects.get_or_create(
            username="admin",
            defaults={
                "email": "admin@example.com",
                "full_name": "Administrator",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        if created:
            admin_user.set_password("admin")  # dev-only password
            admin_user.save()
            self.stdout.write(self.style.WARNING("Admin user created (username=admin, password=admin)"))
        else:
            self.stdout.write(self.style.SUCCESS("Admin user already exists"))

        UserRole.objects.get_or_create(user=admin_user, role=Role.objects.get(name=Role.Name.MANAGER))

        # --------------------------------------------------
        # 3) Master tasks (only when the pipeline is empty)
        # --------------------------------------------------
        if MasterTask.objects.exists():
            self.stdout.write(self.style.SUCCESS("Master tasks already exist"))
        else:
            MasterTask.objects.bulk_create(
                MasterTask(name=name, order=i) for i, name in enumerate(MASTER_TASKS, start=1)
            )
            self.stdout.write(self.style.WARNING(f"{len(MASTER_TASKS)} master tasks created"))

        # --------------------------------------------------
        # 4) Publishers
        # --------------------------------------------------
        for name, segment in PUBLISHERS:
            Publisher.objects.get_or_create(name=name, defaults={"segment_description": segment})
        self.stdout.write(self.style.SUCCESS("Publishers ensured"))

        self.stdout.write(self.style.SUCCESS("Seeding complete"))
