# accounts/models.py
from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model for Pressroom.

    Keep Django username field for compatibility,
    but require unique email and allow login via email.
    """
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255, blank=True, default="")

    # Publisher-scoped staff see analytics for their imprint only
    publisher = models.ForeignKey(
        "publishers.Publisher",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="staff",
    )

    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username


class Role(models.Model):
    """
    High-level role taxonomy.
    This is deliberately small and stable.
    """

    class Name(models.TextChoices):
        MANAGER = "MANAGER", "Manajer"            # Runs the house, approves manuscripts
        EDITOR = "EDITOR", "Tim Editorial"        # Works production tasks
        AUTHOR = "AUTHOR", "Penulis"              # Submits manuscripts
        TRANSLATOR = "TRANSLATOR", "Penerjemah"   # Submits translations

    name = models.CharField(max_length=20, choices=Name.choices, unique=True)

    def __str__(self) -> str:
        return self.get_name_display()


class UserRole(models.Model):
    """
    Assigns a Role to a User.
    A user may hold several roles.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="user_roles")
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="assignments")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("user", "role")]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.role.name}"


class UserProfile(models.Model):
    """
    Author-facing biography kept between submissions.
    Updated from step 3 and 4 of the submission wizard.
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")

    nik = models.CharField(max_length=50, blank=True, default="")
    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=25, blank=True, default="")
    education = models.CharField(max_length=255, blank=True, default="")
    activities = models.TextField(blank=True, default="")
    published_writing = models.TextField(blank=True, default="")
    other_books = models.TextField(blank=True, default="")
    social_media = models.JSONField(default=dict, blank=True)
    network = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Profile:{self.user_id}"
