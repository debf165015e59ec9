# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt

from django.contrib.auth import get_user_model
from django.test import TestCase

from manuscripts.models import Manuscript
from production.models import Book, MasterTask, TaskProgress
from production.services import (
    FINISHED_STAGE,
    TaskOrderError,
    add_master_task,
    book_stats,
    books_by_stage,
    create_book_from_manuscript,
    current_stage,
    is_overdue,
    progress_percentage,
    reorder_tasks,
    update_task_progress,
)
from publishers.models import Publisher

TODAY = dt.date(2026, 5, 4)


class ProductionTestMixin:
    def setUp(self):
        User = get_user_model()
        self.pic = User.objects.create_user(username="pic", email="pic@example.com", password="pw")
        self.author = User.objects.create_user(username="penulis", email="penulis@example.com", password="pw")
        self.publisher = Publisher.objects.create(name="Gramedia Pustaka Utama")
        self.cover = MasterTask.objects.create(name="Cover Design", order=1, estimated_days=3)
        self.layout = MasterTask.objects.create(name="Layout", order=2, estimated_days=7)

    def make_book(self, title="Judul X", target=dt.date(2026, 8, 1)):
        manuscript = Manuscript.objects.create(
            submitted_by=self.author,
            title=title,
            status=Manuscript.Status.APPROVED,
            file=f"manuscripts/{title}.pdf",
        )
        return create_book_from_manuscript(
            manuscript, publisher=self.publisher, pic=self.pic, target_print_date=target, today=TODAY
        )

    def row(self, book, task):
        return TaskProgress.objects.select_related("book").get(book=book, task=task)


class MasterTaskTests(ProductionTestMixin, TestCase):
    def test_new_task_goes_last(self):
        task = add_master_task("  Proofread Akhir ")
        self.assertEqual((task.name, task.order), ("Proofread Akhir", 3))

    def test_reorder_rewrites_positions(self):
        extra = add_master_task("Naik Cetak")
        reorder_tasks([extra.pk, self.cover.pk, self.layout.pk])
        self.assertEqual(
            list(MasterTask.objects.order_by("order").values_list("name", flat=True)),
            ["Naik Cetak", "Cover Design", "Layout"],
        )

    def test_reorder_refuses_partial_or_duplicate_lists(self):
        with self.assertRaises(TaskOrderError):
            reorder_tasks([self.cover.pk])
        with self.assertRaises(TaskOrderError):
            reorder_tasks([self.cover.pk, self.cover.pk])


class BookProgressTests(ProductionTestMixin, TestCase):
    def test_new_book_starts_as_draft(self):
        book = self.make_book()
        self.assertEqual(book.status, Book.Status.DRAFT)
        self.assertEqual(book.tasks.count(), 2)
        self.assertEqual(progress_percentage(book), 0)
        self.assertEqual(current_stage(book), self.cover)

    def test_starting_a_task_moves_book_to_editing(self):
        book = self.make_book()
        progress = update_task_progress(
            self.row(book, self.cover), status=TaskProgress.Status.IN_PROGRESS, today=TODAY
        )
        book.refresh_from_db()
        self.assertEqual(book.status, Book.Status.EDITING)
        self.assertEqual(progress.started_on, TODAY)
        self.assertIsNone(progress.completed_on)

    def test_finishing_every_task_publishes_the_book(self):
        book = self.make_book()
        done_on = TODAY + dt.timedelta(days=9)
        for task in (self.cover, self.layout):
            update_task_progress(self.row(book, task), status=TaskProgress.Status.COMPLETED, today=done_on)

        book.refresh_from_db()
        self.assertEqual(book.status, Book.Status.PUBLISHED)
        self.assertEqual(book.actual_print_date, done_on)
        self.assertEqual(progress_percentage(book), 100)
        self.assertIsNone(current_stage(book))

    def test_reopening_a_task_unpublishes(self):
        book = self.make_book()
        for task in (self.cover, self.layout):
            update_task_progress(self.row(book, task), status=TaskProgress.Status.COMPLETED, today=TODAY)
        update_task_progress(self.row(book, self.layout), status=TaskProgress.Status.PENDING, today=TODAY)

        book.refresh_from_db()
        self.assertEqual(book.status, Book.Status.EDITING)
        self.assertIsNone(book.actual_print_date)
        self.assertEqual(progress_percentage(book), 50)
        self.assertEqual(current_stage(book), self.layout)

    def test_other_fields_update_without_status_change(self):
        book = self.make_book()
        progress = update_task_progress(
            self.row(book, self.cover), pic=None, deadline=dt.date(2026, 5, 30), notes="tunggu ilustrasi"
        )
        progress.refresh_from_db()
        self.assertIsNone(progress.pic)
        self.assertEqual(progress.deadline, dt.date(2026, 5, 30))
        self.assertEqual(progress.notes, "tunggu ilustrasi")
        self.assertEqual(progress.status, TaskProgress.Status.PENDING)

    def test_unknown_status_is_refused(self):
        book = self.make_book()
        with self.assertRaises(ValueError):
            update_task_progress(self.row(book, self.cover), status="lost")

    def test_overdue(self):
        book = self.make_book()
        row = self.row(book, self.cover)
        self.assertFalse(is_overdue(row, today=TODAY))
        self.assertTrue(is_overdue(row, today=TODAY + dt.timedelta(days=4)))
        update_task_progress(row, status=TaskProgress.Status.COMPLETED, today=TODAY)
        self.assertFalse(is_overdue(row, today=TODAY + dt.timedelta(days=4)))


class BoardAndStatsTests(ProductionTestMixin, TestCase):
    def test_books_grouped_by_current_stage(self):
        fresh = self.make_book("Baru")
        halfway = self.make_book("Setengah")
        finished = self.make_book("Selesai")
        update_task_progress(self.row(halfway, self.cover), status=TaskProgress.Status.COMPLETED, today=TODAY)
        for task in (self.cover, self.layout):
            update_task_progress(self.row(finished, task), status=TaskProgress.Status.COMPLETED, today=TODAY)

        board = books_by_stage()
        self.assertEqual(list(board), ["Cover Design", "Layout", FINISHED_STAGE])
        self.assertEqual([b.pk for b in board["Cover Design"]], [fresh.pk])
        self.assertEqual([b.pk for b in board["Layout"]], [halfway.pk])
        self.assertEqual([b.pk for b in board[FINISHED_STAGE]], [finished.pk])

    def test_stats_leave_published_books_out_of_near_deadline(self):
        soon = self.make_book("Segera", target=TODAY + dt.timedelta(days=3))
        self.make_book("Nanti", target=TODAY + dt.timedelta(days=60))
        for task in (self.cover, self.layout):
            update_task_progress(self.row(soon, task), status=TaskProgress.Status.COMPLETED, today=TODAY)

        stats = book_stats(today=TODAY, warning_days=7)
        self.assertEqual(stats["near_deadline"], 0)
        self.assertEqual(stats["published"], 1)
        self.assertEqual(stats["yearly_target"], 2)
        self.assertEqual(stats["chart"], {"Belum Mulai": 1, "Dalam Proses": 0, "Selesai": 1})
