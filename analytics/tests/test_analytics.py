# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from accounts.models import Role
from accounts.services_roles import set_user_roles
from analytics.services import (
    book_status_distribution,
    build_analytics,
    dashboard_metrics,
    deadline_performance,
    genre_distribution,
    monthly_productivity,
    stage_performance,
    top_performers,
    workload_distribution,
)
from manuscripts.models import Manuscript
from production.models import MasterTask, TaskProgress
from production.services import create_book_from_manuscript, update_task_progress
from publishers.models import Publisher

TODAY = dt.date(2026, 6, 15)


class AnalyticsServiceTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.ani = User.objects.create_user(username="ani", email="ani@example.com", password="pw", full_name="Ani")
        self.budi = User.objects.create_user(username="budi", email="budi@example.com", password="pw")
        self.gpu = Publisher.objects.create(name="Gramedia Pustaka Utama")
        self.mizan = Publisher.objects.create(name="Mizan Pustaka")
        self.tasks = [
            MasterTask.objects.create(name=name, order=i, estimated_days=5)
            for i, name in enumerate(["Cover Design", "Editing Naskah", "Layout"], start=1)
        ]
        started = TODAY - dt.timedelta(days=20)
        self.done_book = self.book("Selesai", self.gpu, self.ani, "Fiksi", started)
        self.open_book = self.book("Jalan", self.mizan, self.budi, "Agama", started)

        for row in self.done_book.tasks.all():
            update_task_progress(row, status=TaskProgress.Status.COMPLETED, today=TODAY - dt.timedelta(days=2))
        first = self.open_book.tasks.get(task=self.tasks[0])
        update_task_progress(first, status=TaskProgress.Status.COMPLETED, today=started + dt.timedelta(days=3))

    def book(self, title, publisher, pic, genre, started):
        manuscript = Manuscript.objects.create(
            submitted_by=pic, title=title, genre=genre, status=Manuscript.Status.APPROVED, file=f"manuscripts/{title}.pdf"
        )
        return create_book_from_manuscript(
            manuscript, publisher=publisher, pic=pic, target_print_date=TODAY + dt.timedelta(days=90), today=started
        )

    def test_metrics(self):
        m = dashboard_metrics(today=TODAY)
        self.assertEqual(m["total_books"], 2)
        self.assertEqual(m["completed_books"], 1)
        self.assertEqual(m["in_progress_books"], 1)
        self.assertEqual((m["total_tasks"], m["completed_tasks"]), (6, 4))
        self.assertEqual(m["completion_rate"], 66.7)
        # both open tasks on the second book passed their 5-day deadline
        self.assertEqual(m["overdue_tasks"], 2)
        self.assertEqual(m["active_members"], 1)

    def test_metrics_scoped_to_publisher(self):
        m = dashboard_metrics(self.gpu, today=TODAY)
        self.assertEqual((m["total_books"], m["total_tasks"], m["overdue_tasks"], m["active_members"]), (1, 3, 0, 0))

    def test_status_distribution(self):
        dist = {row["name"]: row["value"] for row in book_status_distribution()}
        self.assertEqual(dist, {"Draft": 0, "Dalam Proses": 1, "Selesai": 1})

    def test_monthly_productivity_covers_six_months(self):
        rows = monthly_productivity(today=TODAY)
        self.assertEqual(len(rows), 6)
        self.assertEqual(rows[-1]["month"], "Jun 2026")
        self.assertEqual(rows[-1]["tasks"], 3)
        self.assertEqual(rows[-1]["books"], 1)
        self.assertEqual(rows[-2]["tasks"], 1)
        self.assertNotIn("manuscripts", rows[-1])
        self.assertIn("manuscripts", monthly_productivity(self.gpu, today=TODAY)[-1])

    def test_workload_lists_people_with_open_tasks(self):
        rows = workload_distribution(today=TODAY)
        self.assertEqual([(r["user_id"], r["active_tasks"], r["overdue_tasks"]) for r in rows], [(self.budi.pk, 2, 2)])

    def test_top_performers_need_three_tasks(self):
        rows = top_performers(today=TODAY)
        self.assertEqual([r["name"] for r in rows], ["Ani", "budi"])
        self.assertEqual(rows[0]["completion_rate"], 100.0)
        self.assertEqual(rows[0]["avg_completion_days"], 18.0)
        self.assertEqual(rows[1]["efficiency_score"], 33.3 - 20)

    def test_deadline_performance(self):
        perf = deadline_performance(today=TODAY)
        self.assertEqual(perf, {"on_time": 1, "late": 3, "upcoming": 0, "overdue": 2})

    def test_stage_and_genre(self):
        stages = stage_performance(self.mizan)
        self.assertEqual([s["completed_tasks"] for s in stages], [1, 0, 0])
        self.assertEqual(genre_distribution(), [{"name": "Fiksi", "value": 1, "percentage": 100.0}])

    def test_build_analytics_scope(self):
        whole = build_analytics(self.ani, today=TODAY)
        self.assertIsNone(whole["scope"])
        self.assertIn("top_performers", whole)

        self.ani.publisher = self.mizan
        self.ani.save()
        scoped = build_analytics(self.ani, today=TODAY)
        self.assertEqual(scoped["scope"]["publisher_name"], "Mizan Pustaka")
        self.assertIn("stage_performance", scoped)
        self.assertNotIn("top_performers", scoped)


class AnalyticsViewTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.editor = User.objects.create_user(username="editor", email="e@example.com", password="pw")
        set_user_roles(self.editor, [Role.Name.EDITOR])
        self.author = User.objects.create_user(username="penulis", email="p@example.com", password="pw")
        set_user_roles(self.author, [Role.Name.AUTHOR])

    def test_page_and_feed(self):
        self.client.force_login(self.editor)
        self.assertEqual(self.client.get(reverse("analytics:page")).status_code, 200)
        data = self.client.get(reverse("analytics:data")).json()
        self.assertEqual(data["metrics"]["total_books"], 0)
        self.assertEqual(len(data["monthly_productivity"]), 6)

    def test_authors_are_refused(self):
        self.client.force_login(self.author)
        self.assertEqual(self.client.get(reverse("analytics:data")).status_code, 403)
