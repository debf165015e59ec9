# -*- coding: utf-8 -*-
# publishers/models.py

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Publisher(models.Model):
    """
    Imprint the house publishes under.
    Authors pick up to two of these (priority 1 and 2) when submitting.
    """

    name = models.CharField(max_length=255)
    segment_description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Target(models.Model):
    """
    Planned output for a publisher.

    ANNUAL  -> month is NULL
    MONTHLY -> month is 1..12
    """

    class Type(models.TextChoices):
        ANNUAL = "tahunan", "Tahunan"
        MONTHLY = "bulanan", "Bulanan"

    class Category(models.TextChoices):
        PUBLISH = "target_terbit", "Target terbit"
        ACQUISITION = "target_akuisisi", "Target akuisisi"

    publisher = models.ForeignKey(Publisher, on_delete=models.CASCADE, related_name="targets")
    target_type = models.CharField(max_length=20, choices=Type.choices)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.PUBLISH)
    year = models.PositiveIntegerField()
    month = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(12)],
    )
    amount = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "month", "publisher__name"]
        indexes = [
            models.Index(fields=["publisher", "year"], name="target_publisher_year_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=("publisher", "category", "target_type", "year", "month"),
                name="uniq_publisher_target_period",
            ),
        ]

    def __str__(self) -> str:
        period = f"{self.year}" if self.month is None else f"{self.year}-{self.month:02d}"
        return f"{self.publisher_id} {self.category} {period}: {self.amount}"
