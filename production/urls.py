# -*- coding: utf-8 -*-
# production/urls.py

from django.urls import path

from production import views

app_name = "production"

urlpatterns = [
    path("tasks/", views.task_list, name="task_list"),
    path("tasks/new/", views.task_create, name="task_create"),
    path("tasks/reorder/", views.task_reorder, name="task_reorder"),
    path("tasks/<int:task_id>/edit/", views.task_update, name="task_update"),
    path("tasks/<int:task_id>/delete/", views.task_delete, name="task_delete"),

    path("books/", views.book_list, name="book_list"),
    path("books/progress/", views.progress_board, name="progress_board"),
    path("books/<uuid:book_id>/", views.book_detail, name="book_detail"),
    path("progress/<uuid:progress_id>/", views.task_progress_update, name="task_progress_update"),
]
