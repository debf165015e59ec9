# -*- coding: utf-8 -*-
# manuscripts/urls.py

from django.urls import path

from manuscripts import views, views_approval, views_submit

app_name = "manuscripts"

urlpatterns = [
    # Submission wizard
    path("submit/", views_submit.submit_wizard, name="submit"),
    path("submit/store/", views_submit.submit_store, name="submit_store"),

    # Author pages
    path("mine/", views.submission_list, name="submission_list"),
    path("mine/<uuid:manuscript_id>/", views.submission_detail, name="submission_detail"),

    # Review queue
    path("approval/", views_approval.approval_list, name="approval_list"),
    path("approval/bulk/", views_approval.approval_bulk, name="approval_bulk"),
    path("approval/<uuid:manuscript_id>/", views_approval.approval_detail, name="approval_detail"),
    path("approval/<uuid:manuscript_id>/approve/", views_approval.approve, name="approve"),
    path("approval/<uuid:manuscript_id>/reject/", views_approval.reject, name="reject"),
]
