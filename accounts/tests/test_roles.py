# -*- coding: utf-8 -*-

from __future__ import annotations

from django.contrib.auth import authenticate, get_user_model
from django.core.management import call_command
from django.test import RequestFactory, TestCase

from accounts.context_processors import role_flags
from accounts.models import Role, UserProfile, UserRole
from accounts.services_roles import RoleAssignmentError, has_role, is_staff_member, set_user_roles
from production.models import MasterTask
from publishers.models import Publisher


class RoleServiceTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="u", email="u@example.com", password="pw")

    def test_profile_created_with_user(self):
        self.assertTrue(UserProfile.objects.filter(user=self.user).exists())

    def test_set_roles_replaces_previous(self):
        set_user_roles(self.user, [Role.Name.AUTHOR, Role.Name.TRANSLATOR])
        set_user_roles(self.user, [Role.Name.EDITOR])
        self.assertEqual(list(UserRole.objects.filter(user=self.user).values_list("role__name", flat=True)), ["EDITOR"])
        self.assertTrue(is_staff_member(self.user))
        self.assertFalse(has_role(self.user, Role.Name.AUTHOR))

    def test_allowed_list_is_enforced(self):
        with self.assertRaises(RoleAssignmentError):
            set_user_roles(self.user, [Role.Name.MANAGER], allowed=[Role.Name.AUTHOR])
        self.assertFalse(UserRole.objects.filter(user=self.user).exists())

    def test_superuser_passes_every_check(self):
        root = get_user_model().objects.create_superuser(username="root", email="r@example.com", password="pw")
        self.assertTrue(has_role(root, Role.Name.MANAGER))

    def test_context_flags(self):
        set_user_roles(self.user, [Role.Name.AUTHOR])
        request = RequestFactory().get("/")
        request.user = self.user
        self.assertEqual(
            role_flags(request)["pr_roles"],
            {"is_manager": False, "is_editor": False, "is_staff_member": False, "can_submit": True},
        )


class LoginBackendTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="budi", email="Budi@Mail.com", password="rahasia-123")

    def test_login_by_username_or_email(self):
        self.assertEqual(authenticate(username="budi", password="rahasia-123"), self.user)
        self.assertEqual(authenticate(username=" budi@mail.com ", password="rahasia-123"), self.user)

    def test_wrong_password_or_unknown_login(self):
        self.assertIsNone(authenticate(username="budi", password="salah"))
        self.assertIsNone(authenticate(username="nobody@mail.com", password="rahasia-123"))


class SeedCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_initial_data", verbosity=0)
        call_command("seed_initial_data", verbosity=0)

        self.assertEqual(Role.objects.count(), 4)
        self.assertEqual(MasterTask.objects.count(), 17)
        self.assertEqual(MasterTask.objects.order_by("order").first().name, "Cover Design")
        self.assertEqual(MasterTask.objects.order_by("order").last().name, "Turun Cetak")
        self.assertEqual(Publisher.objects.count(), 5)

        admin = get_user_model().objects.get(username="admin")
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password("admin"))
        self.assertTrue(UserRole.objects.filter(user=admin, role__name=Role.Name.MANAGER).exists())
