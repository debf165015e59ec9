# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt
import os
import shutil
import tempfile
import time
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse

from accounts.models import Role, UserProfile
from accounts.services_roles import set_user_roles
from manuscripts.models import Manuscript, ManuscriptAuthor
from manuscripts.services import wizard_flow as flow
from manuscripts.services_submission import (
    STAGING_DIR,
    SubmissionRejected,
    prune_staged,
    stage_upload,
    store_submission,
    wizard_transport,
)
from manuscripts.views_submit import SESSION_KEY
from notifications.models import Notification
from publishers.models import Publisher

MEDIA_ROOT = tempfile.mkdtemp()

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


def pdf_upload(name="naskah.pdf", content=PDF_BYTES, content_type="application/pdf"):
    return SimpleUploadedFile(name, content, content_type=content_type)


def make_user(username, *roles, **extra):
    user = get_user_model().objects.create_user(
        username=username, email=extra.pop("email", f"{username}@example.com"), password="pw", **extra
    )
    set_user_roles(user, roles)
    return user


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class StoreSubmissionTests(TestCase):
    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)

    def setUp(self):
        self.author = make_user("penulis", Role.Name.AUTHOR)
        self.manager = make_user("manajer", Role.Name.MANAGER)
        self.p1 = Publisher.objects.create(name="Gramedia Pustaka Utama")
        self.p2 = Publisher.objects.create(name="Mizan Pustaka")

    def payload(self, **overrides):
        data = {
            "publisher_1": str(self.p1.pk),
            "publisher_2": "",
            "title": "Judul X",
            "synopsis": "S",
            "category": "Fiksi",
            "reader_segment": "dewasa",
            "author_name": "Budi",
            "nik": "1111111111111111",
            "phone": "081234567890",
            "email": "budi@mail.com",
            "promotion_plan": "Promo plan",
            "social_media": "@budi",
        }
        data.update(overrides)
        return data

    def test_store_creates_manuscript_and_relations(self):
        m = store_submission(
            self.author,
            self.payload(publisher_2=str(self.p2.pk), co_author_name="Ani"),
            {"manuscript_file": pdf_upload()},
        )

        m.refresh_from_db()
        self.assertEqual(m.status, Manuscript.Status.REVIEW)
        self.assertEqual(m.genre, "Fiksi")
        self.assertEqual(m.reader_segment, "dewasa")
        self.assertEqual(m.extra_info["promotion_plan"], "Promo plan")
        self.assertIsNone(m.extra_info["keywords"])
        self.assertTrue(m.file.name.endswith(".pdf"))

        self.assertEqual(
            list(m.target_publishers.order_by("priority").values_list("publisher_id", "priority")),
            [(self.p1.pk, 1), (self.p2.pk, 2)],
        )
        roles = dict(m.author_links.values_list("author__full_name", "role"))
        self.assertEqual(roles, {"Budi": ManuscriptAuthor.Role.PRIMARY, "Ani": ManuscriptAuthor.Role.CO_AUTHOR})
        self.assertEqual(m.primary_author().user, self.author)

    def test_store_updates_author_profile(self):
        store_submission(self.author, self.payload(), {"manuscript_file": pdf_upload()})

        self.author.refresh_from_db()
        self.assertEqual(self.author.full_name, "Budi")
        self.assertEqual(self.author.email, "budi@mail.com")
        profile = UserProfile.objects.get(user=self.author)
        self.assertEqual(profile.nik, "1111111111111111")
        self.assertEqual(profile.social_media, {"data": "@budi"})

    def test_store_notifies_managers(self):
        m = store_submission(self.author, self.payload(), {"manuscript_file": pdf_upload()})
        n = Notification.objects.get(recipient=self.manager)
        self.assertEqual(n.type, Notification.Type.NEW_SUBMISSION)
        self.assertEqual(n.manuscript_id, m.pk)
        self.assertFalse(Notification.objects.filter(recipient=self.author).exists())

    def test_rejects_non_pdf_content(self):
        with self.assertRaises(SubmissionRejected) as ctx:
            store_submission(
                self.author,
                self.payload(),
                {"manuscript_file": pdf_upload(content=b"PK\x03\x04 not a pdf")},
            )
        self.assertIn("File harus PDF.", ctx.exception.messages)
        self.assertEqual(Manuscript.objects.count(), 0)

    @override_settings(PRESSROOM_MAX_MANUSCRIPT_BYTES=10)
    def test_rejects_oversized_file(self):
        with self.assertRaises(SubmissionRejected) as ctx:
            store_submission(self.author, self.payload(), {"manuscript_file": pdf_upload()})
        self.assertEqual(ctx.exception.messages, ["Ukuran maksimal 50 MB."])

    def test_rejects_email_of_another_account(self):
        with self.assertRaises(SubmissionRejected) as ctx:
            store_submission(
                self.author,
                self.payload(email=self.manager.email),
                {"manuscript_file": pdf_upload()},
            )
        self.assertEqual(ctx.exception.messages, ["Email sudah digunakan akun lain."])

    def test_rejects_same_publisher_twice(self):
        with self.assertRaises(SubmissionRejected) as ctx:
            store_submission(
                self.author,
                self.payload(publisher_2=str(self.p1.pk)),
                {"manuscript_file": pdf_upload()},
            )
        self.assertEqual(ctx.exception.messages, ["Penerbit prioritas 2 harus berbeda."])

    def test_collects_every_message(self):
        with self.assertRaises(SubmissionRejected) as ctx:
            store_submission(self.author, self.payload(title="", promotion_plan=""), {})
        self.assertEqual(
            ctx.exception.messages,
            ["Judul naskah wajib diisi.", "File PDF wajib diunggah.", "Rencana promosi wajib diisi."],
        )

    def test_staged_upload_goes_through_transport(self):
        staged = stage_upload(pdf_upload())
        self.assertTrue(staged.path.startswith(STAGING_DIR))
        self.assertTrue(default_storage.exists(staged.path))

        state = flow.edit(
            flow.initial_state(),
            {**self.payload(), "manuscript_file": staged},
        )
        m = wizard_transport(self.author)(state.form)

        self.assertEqual(m.title, "Judul X")
        self.assertFalse(default_storage.exists(staged.path))

    @override_settings(PRESSROOM_MAX_MANUSCRIPT_BYTES=10)
    def test_oversized_upload_is_not_stored(self):
        staged = stage_upload(pdf_upload())
        self.assertEqual(staged.path, "")
        self.assertEqual(staged.size, len(PDF_BYTES))

    def test_transport_without_staged_file_is_rejected(self):
        state = flow.edit(flow.initial_state(), self.payload())
        with self.assertRaises(SubmissionRejected):
            wizard_transport(self.author)(state.form)

    def test_prune_removes_only_old_staged_files(self):
        old = stage_upload(pdf_upload(name="lama.pdf"))
        fresh = stage_upload(pdf_upload(name="baru.pdf"))
        two_days_ago = time.time() - 2 * 24 * 60 * 60
        os.utime(default_storage.path(old.path), (two_days_ago, two_days_ago))

        removed = prune_staged(dt.timedelta(days=1))

        self.assertGreaterEqual(removed, 1)
        self.assertFalse(default_storage.exists(old.path))
        self.assertTrue(default_storage.exists(fresh.path))

    def test_prune_command_uses_hours_option(self):
        old = stage_upload(pdf_upload(name="lama.pdf"))
        three_hours_ago = time.time() - 3 * 60 * 60
        os.utime(default_storage.path(old.path), (three_hours_ago, three_hours_ago))

        out = StringIO()
        call_command("prune_staged_uploads", "--hours", "1", stdout=out)

        self.assertFalse(default_storage.exists(old.path))
        self.assertIn("staged upload(s) removed", out.getvalue())


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class SubmissionViewTests(TestCase):
    def setUp(self):
        self.author = make_user("penulis_v", Role.Name.AUTHOR)
        self.publisher = Publisher.objects.create(name="Elex Media Komputindo")
        self.client.force_login(self.author)
        self.url = reverse("manuscripts:submit")

    def wizard(self):
        return flow.from_session(self.client.session.get(SESSION_KEY))

    def test_editor_cannot_open_wizard(self):
        editor = make_user("editor_v", Role.Name.EDITOR)
        self.client.force_login(editor)
        self.assertEqual(self.client.get(self.url).status_code, 403)

    def test_wizard_walk_through(self):
        self.client.post(self.url, {"action": "toggle_publisher", "publisher_id": self.publisher.pk})
        self.client.post(self.url, {"action": "next"})
        self.assertEqual(self.wizard().step, 2)

        self.client.post(
            self.url,
            {
                "action": "next",
                "title": "Judul X",
                "synopsis": "S",
                "category": "Fiksi",
                "reader_segment": "dewasa",
                "manuscript_file": pdf_upload(),
            },
        )
        self.assertEqual(self.wizard().step, 3)
        self.assertEqual(self.wizard().form.manuscript_file.name, "naskah.pdf")

        self.client.post(
            self.url,
            {
                "action": "next",
                "author_name": "Budi",
                "nik": "1111111111111111",
                "phone": "081234567890",
                "email": "budi@mail.com",
            },
        )
        self.client.post(self.url, {"action": "submit", "promotion_plan": "Promo plan"})
        self.assertEqual(self.wizard().phase, flow.WizardPhase.CONFIRMING)

        resp = self.client.get(self.url)
        summary = resp.context["summary"]
        self.assertEqual(
            (summary.title, summary.publisher_count, summary.reader_segment, summary.author_name, summary.email),
            ("Judul X", 1, "dewasa", "Budi", "budi@mail.com"),
        )

        self.client.post(self.url, {"action": "confirm"})
        self.assertEqual(self.wizard().phase, flow.WizardPhase.SUCCEEDED)
        self.assertTrue(Manuscript.objects.filter(title="Judul X", submitted_by=self.author).exists())

        resp = self.client.get(self.url)
        self.assertTrue(resp.context["show_success"])
        self.assertEqual(resp.context["success_message"], flow.SUCCESS_MESSAGE)

        resp = self.client.post(self.url, {"action": "go_dashboard"})
        self.assertRedirects(resp, reverse("accounts:dashboard"))
        self.assertEqual(self.wizard(), flow.initial_state())

    def test_stepper_keeps_unsaved_step_input(self):
        self.client.post(self.url, {"action": "toggle_publisher", "publisher_id": self.publisher.pk})
        self.client.post(self.url, {"action": "next"})
        self.assertEqual(self.wizard().step, 2)

        self.client.post(self.url, {"action": "goto:1", "title": "Draf Judul", "synopsis": "Sinopsis awal"})
        state = self.wizard()
        self.assertEqual(state.step, 1)
        self.assertEqual((state.form.title, state.form.synopsis), ("Draf Judul", "Sinopsis awal"))

    def test_stepper_forward_jump_counts_the_posted_fields(self):
        self.client.post(self.url, {"action": "toggle_publisher", "publisher_id": self.publisher.pk})
        self.client.post(self.url, {"action": "next"})
        self.client.post(
            self.url,
            {
                "action": "goto:3",
                "title": "Judul X",
                "synopsis": "S",
                "category": "Fiksi",
                "reader_segment": "dewasa",
                "manuscript_file": pdf_upload(),
            },
        )
        self.assertEqual(self.wizard().step, 3)
        self.assertEqual(self.wizard().form.title, "Judul X")

    def test_stepper_buttons_submit_the_wizard_form(self):
        self.client.post(self.url, {"action": "toggle_publisher", "publisher_id": self.publisher.pk})
        self.client.post(self.url, {"action": "next"})
        resp = self.client.get(self.url)
        self.assertContains(resp, 'form="wizard-form" name="action" value="goto:1"')
        self.assertContains(resp, 'id="wizard-form"')

    def test_next_with_errors_stays_and_shows_them(self):
        self.client.post(self.url, {"action": "next"})
        resp = self.client.get(self.url)
        self.assertEqual(resp.context["wizard"].step, 1)
        self.assertEqual(resp.context["errors"], {"publisher_1": "Pilih minimal 1 penerbit."})
        self.assertFalse(resp.context["stepper"][1]["accessible"])

    def test_unknown_action_is_ignored(self):
        resp = self.client.post(self.url, {"action": "explode"})
        self.assertRedirects(resp, self.url)
        self.assertEqual(self.wizard(), flow.initial_state())

    def test_store_endpoint_success_flash(self):
        resp = self.client.post(
            reverse("manuscripts:submit_store"),
            {
                "publisher_1": self.publisher.pk,
                "title": "Judul X",
                "synopsis": "S",
                "category": "Fiksi",
                "reader_segment": "dewasa",
                "manuscript_file": pdf_upload(),
                "author_name": "Budi",
                "nik": "1111111111111111",
                "phone": "081234567890",
                "email": "budi@mail.com",
                "promotion_plan": "Promo plan",
            },
        )
        self.assertRedirects(resp, self.url)
        self.assertEqual(Manuscript.objects.count(), 1)

        resp = self.client.get(self.url)
        self.assertTrue(resp.context["show_success"])
        self.assertEqual(resp.context["success_message"], "Naskah berhasil dikirim dan profil diperbarui.")

    def test_store_endpoint_error_flash(self):
        resp = self.client.post(reverse("manuscripts:submit_store"), {"title": "Judul X"}, follow=True)
        texts = [str(m) for m in resp.context["messages"]]
        self.assertEqual(len(texts), 1)
        self.assertIn("Pilih minimal 1 penerbit.", texts[0])
        self.assertEqual(Manuscript.objects.count(), 0)

    def test_store_endpoint_requires_post(self):
        self.assertEqual(self.client.get(reverse("manuscripts:submit_store")).status_code, 405)
