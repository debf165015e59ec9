import uuid

import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import manuscripts.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("publishers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Manuscript",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("synopsis", models.TextField(blank=True, default="")),
                ("genre", models.CharField(blank=True, default="", max_length=100)),
                (
                    "status",
                    models.CharField(
                        choices=[("review", "Menunggu review"), ("approved", "Disetujui"), ("canceled", "Ditolak")],
                        default="review",
                        max_length=20,
                    ),
                ),
                ("file", models.FileField(max_length=255, upload_to=manuscripts.models.manuscript_upload_to)),
                ("extra_info", models.JSONField(blank=True, default=dict)),
                ("submitted_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "submitted_by",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="manuscripts", to=settings.AUTH_USER_MODEL),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="manuscript_status_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Author",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("full_name", models.CharField(max_length=255)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("nik", models.CharField(blank=True, default="", max_length=50)),
                ("address", models.TextField(blank=True, default="")),
                ("phone", models.CharField(blank=True, default="", max_length=25)),
                ("education", models.CharField(blank=True, default="", max_length=255)),
                ("activities", models.TextField(blank=True, default="")),
                ("published_writing", models.TextField(blank=True, default="")),
                ("other_books", models.TextField(blank=True, default="")),
                ("social_media", models.JSONField(blank=True, default=dict)),
                ("network", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=models.SET_NULL,
                        related_name="author_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["full_name", "email"], name="author_name_email_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ManuscriptAuthor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[("primary", "Penulis utama"), ("co_author", "Penulis pendamping")],
                        default="primary",
                        max_length=20,
                    ),
                ),
                ("position", models.PositiveSmallIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "author",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="manuscript_links", to="manuscripts.author"),
                ),
                (
                    "manuscript",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="author_links", to="manuscripts.manuscript"),
                ),
            ],
            options={
                "ordering": ["position"],
                "constraints": [
                    models.UniqueConstraint(fields=("manuscript", "author"), name="uniq_manuscript_author"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ManuscriptTargetPublisher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("priority", models.PositiveSmallIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "manuscript",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="target_publishers", to="manuscripts.manuscript"),
                ),
                (
                    "publisher",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="manuscript_targets", to="publishers.publisher"),
                ),
            ],
            options={
                "ordering": ["priority"],
                "constraints": [
                    models.UniqueConstraint(fields=("manuscript", "publisher"), name="uniq_manuscript_publisher"),
                    models.UniqueConstraint(fields=("manuscript", "priority"), name="uniq_manuscript_priority"),
                ],
            },
        ),
    ]
