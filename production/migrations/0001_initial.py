import uuid

from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("manuscripts", "0001_initial"),
        ("publishers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MasterTask",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("order", models.PositiveIntegerField(default=1)),
                ("estimated_days", models.PositiveIntegerField(default=7)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Book",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Belum mulai"),
                            ("editing", "Dalam proses"),
                            ("review", "Review akhir"),
                            ("published", "Terbit"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("target_print_date", models.DateField()),
                ("actual_print_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "manuscript",
                    models.OneToOneField(on_delete=models.CASCADE, related_name="book", to="manuscripts.manuscript"),
                ),
                (
                    "pic",
                    models.ForeignKey(on_delete=models.PROTECT, related_name="books_as_pic", to=settings.AUTH_USER_MODEL),
                ),
                (
                    "publisher",
                    models.ForeignKey(on_delete=models.PROTECT, related_name="books", to="publishers.publisher"),
                ),
            ],
            options={
                "ordering": ["target_print_date", "title"],
                "indexes": [
                    models.Index(fields=["status"], name="book_status_idx"),
                    models.Index(fields=["publisher", "status"], name="book_publisher_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TaskProgress",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Belum mulai"), ("in_progress", "Dikerjakan"), ("completed", "Selesai")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("started_on", models.DateField(blank=True, null=True)),
                ("deadline", models.DateField(blank=True, null=True)),
                ("completed_on", models.DateField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "book",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="tasks", to="production.book"),
                ),
                (
                    "pic",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=models.SET_NULL,
                        related_name="task_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "task",
                    models.ForeignKey(on_delete=models.CASCADE, related_name="progress_rows", to="production.mastertask"),
                ),
            ],
            options={
                "ordering": ["task__order", "task_id"],
                "constraints": [
                    models.UniqueConstraint(fields=("book", "task"), name="uniq_book_task"),
                ],
                "indexes": [
                    models.Index(fields=["status", "deadline"], name="taskprogress_status_dl_idx"),
                ],
            },
        ),
    ]
