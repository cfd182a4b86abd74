# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from leaves.views.leave_view import LeaveApplicationViewSet, SupportingDocumentUploadView

router = DefaultRouter()
router.register(r"applications", LeaveApplicationViewSet, basename="leave-applications")

urlpatterns = [
    path("", include(router.urls)),
    path("documents/", SupportingDocumentUploadView.as_view(), name="leave-documents"),
]
