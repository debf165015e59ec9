# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.models import Role
from accounts.services_roles import set_user_roles
from manuscripts.models import Manuscript, ManuscriptTargetPublisher
from manuscripts.services_approval import (
    ApprovalError,
    approval_queryset,
    approval_stats,
    approve_manuscript,
    bulk_decide,
    reject_manuscript,
)
from notifications.models import Notification
from production.models import Book, MasterTask, TaskProgress
from publishers.models import Publisher


def make_user(username, *roles, **extra):
    user = get_user_model().objects.create_user(
        username=username, email=f"{username}@example.com", password="pw", **extra
    )
    set_user_roles(user, roles)
    return user


class ApprovalServiceTests(TestCase):
    def setUp(self):
        self.manager = make_user("manajer", Role.Name.MANAGER)
        self.editor = make_user("editor", Role.Name.EDITOR, full_name="Eka Editor")
        self.author = make_user("penulis", Role.Name.AUTHOR, full_name="Budi Santoso")
        self.publisher = Publisher.objects.create(name="Penerbit Erlangga")
        self.manuscript = Manuscript.objects.create(
            submitted_by=self.author, title="Judul X", genre="Fiksi", file="manuscripts/x.pdf"
        )
        ManuscriptTargetPublisher.objects.create(manuscript=self.manuscript, publisher=self.publisher, priority=1)
        MasterTask.objects.create(name="Cover Design", order=1, estimated_days=5)
        MasterTask.objects.create(name="Layout", order=2, estimated_days=10)
        self.today = dt.date(2026, 3, 2)

    def test_approve_creates_book_with_task_rows(self):
        book = approve_manuscript(
            self.manuscript,
            by=self.manager,
            publisher=self.publisher,
            pic=self.editor,
            target_print_date=dt.date(2026, 6, 1),
            note="Lanjut",
            today=self.today,
        )

        self.manuscript.refresh_from_db()
        self.assertEqual(self.manuscript.status, Manuscript.Status.APPROVED)
        self.assertEqual(self.manuscript.extra_info["approval_note"], "Lanjut")
        self.assertEqual(self.manuscript.extra_info["approved_by"], self.manager.pk)

        self.assertEqual(book.status, Book.Status.DRAFT)
        self.assertEqual(book.title, "Judul X")
        rows = list(book.tasks.order_by("task__order").values_list("status", "started_on", "deadline"))
        self.assertEqual(
            rows,
            [
                (TaskProgress.Status.PENDING, self.today, dt.date(2026, 3, 7)),
                (TaskProgress.Status.PENDING, self.today, dt.date(2026, 3, 12)),
            ],
        )
        self.assertTrue(
            Notification.objects.filter(recipient=self.author, type=Notification.Type.APPROVED).exists()
        )

    def test_approve_needs_future_print_date(self):
        with self.assertRaises(ApprovalError):
            approve_manuscript(
                self.manuscript,
                by=self.manager,
                publisher=self.publisher,
                pic=self.editor,
                target_print_date=self.today,
                today=self.today,
            )
        self.assertFalse(Book.objects.exists())

    def test_decided_manuscript_cannot_be_decided_again(self):
        reject_manuscript(self.manuscript, by=self.manager, reason="Tema kurang sesuai")
        with self.assertRaises(ApprovalError):
            reject_manuscript(self.manuscript, by=self.manager, reason="Tema kurang sesuai")

    def test_stale_copy_cannot_approve_twice(self):
        stale = Manuscript.objects.get(pk=self.manuscript.pk)
        approve_manuscript(
            self.manuscript,
            by=self.manager,
            publisher=self.publisher,
            pic=self.editor,
            target_print_date=dt.date(2026, 6, 1),
            today=self.today,
        )
        self.assertEqual(stale.status, Manuscript.Status.REVIEW)

        with self.assertRaises(ApprovalError):
            approve_manuscript(
                stale,
                by=self.manager,
                publisher=self.publisher,
                pic=self.editor,
                target_print_date=dt.date(2026, 6, 1),
                today=self.today,
            )
        self.assertEqual(Book.objects.count(), 1)

    def test_stale_copy_cannot_reject_an_approved_manuscript(self):
        stale = Manuscript.objects.get(pk=self.manuscript.pk)
        approve_manuscript(
            self.manuscript,
            by=self.manager,
            publisher=self.publisher,
            pic=self.editor,
            target_print_date=dt.date(2026, 6, 1),
            today=self.today,
        )
        with self.assertRaises(ApprovalError):
            reject_manuscript(stale, by=self.manager, reason="Tema kurang sesuai")
        self.manuscript.refresh_from_db()
        self.assertEqual(self.manuscript.status, Manuscript.Status.APPROVED)

    def test_reject_needs_a_real_reason(self):
        with self.assertRaises(ApprovalError):
            reject_manuscript(self.manuscript, by=self.manager, reason="  pendek  ")

    def test_reject_records_reason_and_notifies(self):
        reject_manuscript(self.manuscript, by=self.manager, reason="Tema kurang sesuai")
        self.manuscript.refresh_from_db()
        self.assertEqual(self.manuscript.status, Manuscript.Status.CANCELED)
        self.assertEqual(self.manuscript.extra_info["rejection_reason"], "Tema kurang sesuai")
        n = Notification.objects.get(recipient=self.author)
        self.assertEqual((n.type, n.body), (Notification.Type.REJECTED, "Tema kurang sesuai"))

    def test_bulk_decide_skips_bad_ids_and_unchanged_rows(self):
        other = Manuscript.objects.create(
            submitted_by=self.author, title="Judul Y", status=Manuscript.Status.APPROVED, file="manuscripts/y.pdf"
        )
        count = bulk_decide([str(self.manuscript.pk), str(other.pk), "nonsense"], "approve", by=self.manager)
        self.assertEqual(count, 1)
        self.manuscript.refresh_from_db()
        self.assertEqual(self.manuscript.status, Manuscript.Status.APPROVED)
        self.assertFalse(Book.objects.exists())

    def test_bulk_decide_needs_a_selection(self):
        with self.assertRaises(ApprovalError):
            bulk_decide(["nonsense"], "reject", by=self.manager)
        with self.assertRaises(ApprovalError):
            bulk_decide([str(self.manuscript.pk)], "archive", by=self.manager)

    def test_queue_filters_and_stats(self):
        Manuscript.objects.create(
            submitted_by=self.author, title="Lain", status=Manuscript.Status.CANCELED, file="manuscripts/z.pdf"
        )
        self.assertEqual([m.title for m in approval_queryset(status="review")], ["Judul X"])
        self.assertCountEqual([m.title for m in approval_queryset(search="budi")], ["Lain", "Judul X"])
        self.assertEqual(approval_stats(), {"pending": 1, "approved": 0, "rejected": 1, "total": 2})


class ApprovalViewTests(TestCase):
    def setUp(self):
        self.manager = make_user("manajer_v", Role.Name.MANAGER)
        self.editor = make_user("editor_v", Role.Name.EDITOR)
        self.author = make_user("penulis_v", Role.Name.AUTHOR)
        self.publisher = Publisher.objects.create(name="Mizan Pustaka")
        self.manuscript = Manuscript.objects.create(
            submitted_by=self.author, title="Judul X", file="manuscripts/x.pdf"
        )

    def test_author_cannot_see_queue(self):
        self.client.force_login(self.author)
        self.assertEqual(self.client.get(reverse("manuscripts:approval_list")).status_code, 403)

    def test_editor_sees_queue_but_cannot_decide(self):
        self.client.force_login(self.editor)
        self.assertEqual(self.client.get(reverse("manuscripts:approval_list")).status_code, 200)
        resp = self.client.post(
            reverse("manuscripts:reject", args=[self.manuscript.pk]), {"reason": "Tidak sesuai tema"}
        )
        self.assertEqual(resp.status_code, 403)

    def test_manager_approves(self):
        self.client.force_login(self.manager)
        resp = self.client.post(
            reverse("manuscripts:approve", args=[self.manuscript.pk]),
            {
                "publisher": self.publisher.pk,
                "pic": self.editor.pk,
                "target_print_date": (timezone.localdate() + dt.timedelta(days=30)).isoformat(),
            },
        )
        self.assertRedirects(resp, reverse("manuscripts:approval_list"))
        self.assertTrue(Book.objects.filter(manuscript=self.manuscript, pic=self.editor).exists())

    def test_invalid_approval_rerenders_with_400(self):
        self.client.force_login(self.manager)
        resp = self.client.post(
            reverse("manuscripts:approve", args=[self.manuscript.pk]),
            {"publisher": self.publisher.pk, "pic": self.editor.pk, "target_print_date": "2000-01-01"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("target_print_date", resp.context["approve_form"].errors)

    def test_author_sees_only_own_manuscripts(self):
        other = make_user("penulis_lain", Role.Name.AUTHOR)
        self.client.force_login(other)
        resp = self.client.get(reverse("manuscripts:submission_detail", args=[self.manuscript.pk]))
        self.assertEqual(resp.status_code, 404)

        self.client.force_login(self.author)
        resp = self.client.get(reverse("manuscripts:submission_detail", args=[self.manuscript.pk]))
        self.assertEqual(resp.status_code, 200)
