# -*- coding: utf-8 -*-
# accounts/signals.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AbstractUser
from django.db.models.signals import post_save
from django.dispatch import receiver

from accounts.models import UserProfile


UserModel = get_user_model()


@receiver(post_save, sender=UserModel)
def user_post_create(sender, instance: AbstractUser, created: bool, **kwargs) -> None:
    if not created:
        return

    # Empty biography; the submission wizard fills it in later
    UserProfile.objects.get_or_create(user=instance)
