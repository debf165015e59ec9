# -*- coding: utf-8 -*-

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from accounts.models import Role
from accounts.services_roles import role_names, set_user_roles


def make_user(username, *roles, **extra):
    user = get_user_model().objects.create_user(
        username=username, email=f"{username}@example.com", password="pw", **extra
    )
    set_user_roles(user, roles)
    return user


def roles_of(user):
    user = get_user_model().objects.get(pk=user.pk)
    return role_names(user)


class UserManagementTests(TestCase):
    def setUp(self):
        self.manager = make_user("manajer", Role.Name.MANAGER, full_name="Maya")
        self.editor = make_user("editor", Role.Name.EDITOR, full_name="Eka")
        self.author = make_user("penulis", Role.Name.AUTHOR, full_name="Budi")
        self.client.force_login(self.manager)

    def test_user_list_shows_contributors_only(self):
        resp = self.client.get(reverse("accounts:user_list"))
        names = [u.username for u in resp.context["page"]]
        self.assertEqual(names, ["penulis"])

    def test_non_manager_is_refused(self):
        self.client.force_login(self.editor)
        self.assertEqual(self.client.get(reverse("accounts:user_list")).status_code, 403)
        self.assertEqual(self.client.get(reverse("accounts:team_list")).status_code, 403)

    def test_create_contributor(self):
        self.client.post(
            reverse("accounts:user_create"),
            {
                "full_name": "Citra",
                "email": "Citra@Mail.com",
                "roles": [Role.Name.TRANSLATOR],
                "password": "kata-sandi-aman-9",
                "password_confirmation": "kata-sandi-aman-9",
            },
        )
        user = get_user_model().objects.get(email="citra@mail.com")
        self.assertEqual(user.username, "citra@mail.com")
        self.assertEqual(roles_of(user), {Role.Name.TRANSLATOR})

    def test_user_screen_cannot_grant_staff_roles(self):
        resp = self.client.post(
            reverse("accounts:user_create"),
            {
                "full_name": "Dodi",
                "email": "dodi@mail.com",
                "roles": [Role.Name.MANAGER],
                "password": "kata-sandi-aman-9",
                "password_confirmation": "kata-sandi-aman-9",
            },
            follow=True,
        )
        self.assertFalse(get_user_model().objects.filter(email="dodi@mail.com").exists())
        self.assertEqual(len(list(resp.context["messages"])), 1)

    def test_password_confirmation_must_match(self):
        self.client.post(
            reverse("accounts:user_create"),
            {
                "full_name": "Eko",
                "email": "eko@mail.com",
                "roles": [Role.Name.AUTHOR],
                "password": "kata-sandi-aman-9",
                "password_confirmation": "lain",
            },
        )
        self.assertFalse(get_user_model().objects.filter(email="eko@mail.com").exists())

    def test_update_keeps_roles_the_screen_cannot_assign(self):
        set_user_roles(self.author, [Role.Name.AUTHOR, Role.Name.EDITOR])
        resp = self.client.post(
            reverse("accounts:user_update", args=[self.author.pk]),
            {"full_name": "Budi S", "email": "budi@mail.com", "roles": [Role.Name.TRANSLATOR]},
        )
        self.assertRedirects(resp, reverse("accounts:user_list"))
        self.author.refresh_from_db()
        self.assertEqual(self.author.full_name, "Budi S")
        self.assertEqual(roles_of(self.author), {Role.Name.TRANSLATOR, Role.Name.EDITOR})

    def test_duplicate_email_is_refused(self):
        resp = self.client.post(
            reverse("accounts:user_update", args=[self.author.pk]),
            {"full_name": "Budi", "email": "editor@example.com", "roles": [Role.Name.AUTHOR]},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertIn("email", resp.context["form"].errors)

    def test_delete_contributor(self):
        self.client.post(reverse("accounts:user_delete", args=[self.author.pk]))
        self.assertFalse(get_user_model().objects.filter(pk=self.author.pk).exists())

    def test_user_screen_cannot_delete_staff(self):
        self.client.post(reverse("accounts:user_delete", args=[self.editor.pk]))
        self.assertTrue(get_user_model().objects.filter(pk=self.editor.pk).exists())

    def test_search_and_sort(self):
        make_user("penulis2", Role.Name.AUTHOR, full_name="Anita")
        resp = self.client.get(reverse("accounts:user_list"), {"sort": "full_name", "dir": "desc"})
        self.assertEqual([u.full_name for u in resp.context["page"]], ["Budi", "Anita"])
        resp = self.client.get(reverse("accounts:user_list"), {"q": "anit"})
        self.assertEqual([u.full_name for u in resp.context["page"]], ["Anita"])


class TeamManagementTests(TestCase):
    def setUp(self):
        self.manager = make_user("manajer", Role.Name.MANAGER)
        self.other_manager = make_user("manajer2", Role.Name.MANAGER)
        self.editor = make_user("editor", Role.Name.EDITOR)
        self.client.force_login(self.manager)

    def test_team_list_shows_everyone(self):
        resp = self.client.get(reverse("accounts:team_list"))
        self.assertEqual(resp.context["page"].paginator.count, 3)

    def test_team_screen_can_grant_any_role(self):
        self.client.post(
            reverse("accounts:team_update", args=[self.editor.pk]),
            {"full_name": "Eka", "email": "editor@example.com", "roles": [Role.Name.EDITOR, Role.Name.MANAGER]},
        )
        self.assertEqual(roles_of(self.editor), {Role.Name.EDITOR, Role.Name.MANAGER})

    def test_managers_cannot_be_deleted(self):
        self.client.post(reverse("accounts:team_delete", args=[self.other_manager.pk]))
        self.assertTrue(get_user_model().objects.filter(pk=self.other_manager.pk).exists())

    def test_delete_editor(self):
        self.client.post(reverse("accounts:team_delete", args=[self.editor.pk]))
        self.assertFalse(get_user_model().objects.filter(pk=self.editor.pk).exists())


class DashboardTests(TestCase):
    def test_author_and_staff_get_different_dashboards(self):
        author = make_user("penulis", Role.Name.AUTHOR)
        self.client.force_login(author)
        resp = self.client.get(reverse("accounts:dashboard"))
        self.assertTemplateUsed(resp, "accounts/dashboard_author.html")
        self.assertTrue(resp.context["can_submit"])

        editor = make_user("editor", Role.Name.EDITOR)
        self.client.force_login(editor)
        resp = self.client.get(reverse("accounts:dashboard"))
        self.assertTemplateUsed(resp, "accounts/dashboard_staff.html")

    def test_login_page_renders(self):
        resp = self.client.get(reverse("accounts:login"))
        self.assertEqual(resp.status_code, 200)
