import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Publisher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("segment_description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Target",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("target_type", models.CharField(choices=[("tahunan", "Tahunan"), ("bulanan", "Bulanan")], max_length=20)),
                ("category", models.CharField(choices=[("target_terbit", "Target terbit"), ("target_akuisisi", "Target akuisisi")], default="target_terbit", max_length=20)),
                ("year", models.PositiveIntegerField()),
                (
                    "month",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(12),
                        ],
                    ),
                ),
                ("amount", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("publisher", models.ForeignKey(on_delete=models.CASCADE, related_name="targets", to="publishers.publisher")),
            ],
            options={
                "ordering": ["-year", "month", "publisher__name"],
                "indexes": [
                    models.Index(fields=["publisher", "year"], name="target_publisher_year_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("publisher", "category", "target_type", "year", "month"),
                        name="uniq_publisher_target_period",
                    ),
                ],
            },
        ),
    ]
