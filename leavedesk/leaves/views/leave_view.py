# -*- coding: utf-8 -*-
from __future__ import annotations
from django.core.exceptions import PermissionDenied
from django.db import transaction
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from leaves.exceptions import LeaveWorkflowError
from leaves.models import LeaveApplication
from leaves.serializers.leave_serializer import (
    LeaveApplicationReadSerializer,
    LeaveApplicationPageSerializer,
    LeaveSubmitSerializer,
    LeaveReviewSerializer,
    LeaveApproveSerializer,
    LeaveDeclineSerializer,
    DocumentUploadSerializer,
    SupportingDocumentSerializer,
)
from leaves.selectors import directory_selector as directory
from leaves.selectors import leave_selector
from leaves.services import leave_service
from leaves.services.document_service import upload_document
from .utils import (
    extend_schema, extend_schema_view, OpenApiExample, OpenApiResponse,
    path_int, q_int, q_str, q_date, std_errors,
)

# ---- OpenAPI params shared by the three listings
LIST_PARAMS = [
    q_date("start_from", "Start date >= (YYYY-MM-DD)"),
    q_date("start_to", "Start date <= (YYYY-MM-DD)"),
    q_str("leave_type", "sick | annual | maternity | major"),
    q_str("status", "pending | reviewed | approved | rejected"),
    q_str("employee_name", "Case-insensitive substring of the requester name"),
    q_str("division", "Case-insensitive substring of the division name"),
    q_str("sort_by", "issued_at (default) | start_date | end_date | status | employee_name | division_name"),
    q_str("order", "asc (default) | desc"),
    q_int("page", "Page (default 1)"),
    q_int("limit", "Page size (default 10, clamped to 1..100)"),
]

CONFLICT = {409: OpenApiResponse(description="Transition not allowed / quota exhausted")}


def _fail(e: LeaveWorkflowError) -> Response:
    return Response({"detail": e.message}, status=e.status_code)

def _forbidden(e: PermissionDenied) -> Response:
    return Response({"detail": str(e) or "Permission denied."}, status=status.HTTP_403_FORBIDDEN)

def _read(obj: LeaveApplication, request) -> dict:
    return LeaveApplicationReadSerializer(obj, context={"request": request}).data

def _page_response(page, request) -> Response:
    results = LeaveApplicationReadSerializer(page.items, many=True, context={"request": request}).data
    return page.get_paginated_response(results)


@extend_schema_view(
    retrieve=extend_schema(
        tags=["Leave"],
        summary="Leave application detail",
        description="Requesters see their own applications, reviewers their division, approvers everything.",
        parameters=[path_int("id", "Leave application ID")],
        responses={200: LeaveApplicationReadSerializer, **std_errors()},
    ),
    create=extend_schema(
        tags=["Leave"],
        summary="Submit a leave application (requester)",
        description=(
            "Creates a `pending` application with a new document number `NNN/YYYY`. "
            "Sick leave needs a physician letter: pass `supporting_document_id` or upload `document` (multipart)."
        ),
        request=LeaveSubmitSerializer,
        responses={201: LeaveApplicationReadSerializer, **std_errors({503: OpenApiResponse(description="Allocation failure")})},
        examples=[
            OpenApiExample(
                "Annual leave",
                value={
                    "start_date": "2025-10-06",
                    "end_date": "2025-10-10",
                    "leave_type": LeaveApplication.LeaveType.ANNUAL,
                    "reason": "Family event",
                    "description": "Visiting family out of town",
                },
                request_only=True,
            )
        ],
    ),
)
class LeaveApplicationViewSet(viewsets.GenericViewSet):
    queryset = LeaveApplication.objects.all()
    serializer_class = LeaveApplicationReadSerializer
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r"\d+"

    def retrieve(self, request, pk=None):
        try:
            actor = directory.resolve_actor(request.user)
            obj = leave_service.get_application(int(pk), actor=actor)
        except LeaveWorkflowError as e:
            return _fail(e)
        return Response(_read(obj, request))

    def create(self, request):
        ser = LeaveSubmitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        upload = data.pop("document", None)
        try:
            actor = directory.resolve_actor(request.user)
            with transaction.atomic():
                if upload is not None:
                    data["supporting_document_id"] = upload_document(file=upload, uploader_id=actor.employee_id).pk
                obj = leave_service.submit(employee_id=actor.employee_id, **data)
        except LeaveWorkflowError as e:
            return _fail(e)
        return Response(_read(obj, request), status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Leave"],
        summary="Review decision (division manager)",
        description="`decision=reviewed` forwards to approvers, `decision=rejected` ends the application.",
        request=LeaveReviewSerializer,
        parameters=[path_int("id", "Leave application ID")],
        responses={200: LeaveApplicationReadSerializer, **std_errors(CONFLICT)},
    )
    @action(detail=True, methods=["put"], url_path="review")
    def review(self, request, pk=None):
        ser = LeaveReviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            actor = directory.resolve_actor(request.user)
            obj = leave_service.review(application_id=int(pk), reviewer_id=actor.employee_id, **ser.validated_data)
        except PermissionDenied as e:
            return _forbidden(e)
        except LeaveWorkflowError as e:
            return _fail(e)
        return Response(_read(obj, request))

    @extend_schema(
        tags=["Leave"],
        summary="Final approval (approver)",
        description="Annual leave deducts `day_length` from the requester's allowance in the same transaction.",
        request=LeaveApproveSerializer,
        parameters=[path_int("id", "Leave application ID")],
        responses={200: LeaveApplicationReadSerializer, **std_errors(CONFLICT)},
    )
    @action(detail=True, methods=["put"], url_path="approve")
    def approve(self, request, pk=None):
        ser = LeaveApproveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            actor = directory.resolve_actor(request.user)
            obj = leave_service.approve(application_id=int(pk), approver_id=actor.employee_id, **ser.validated_data)
        except PermissionDenied as e:
            return _forbidden(e)
        except LeaveWorkflowError as e:
            return _fail(e)
        return Response(_read(obj, request))

    @extend_schema(
        tags=["Leave"],
        summary="Reject a reviewed application (approver)",
        request=LeaveDeclineSerializer,
        parameters=[path_int("id", "Leave application ID")],
        responses={200: LeaveApplicationReadSerializer, **std_errors(CONFLICT)},
    )
    @action(detail=True, methods=["put"], url_path="decline")
    def decline(self, request, pk=None):
        ser = LeaveDeclineSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            actor = directory.resolve_actor(request.user)
            obj = leave_service.decline(application_id=int(pk), approver_id=actor.employee_id, **ser.validated_data)
        except PermissionDenied as e:
            return _forbidden(e)
        except LeaveWorkflowError as e:
            return _fail(e)
        return Response(_read(obj, request))

    # ===== Listings =====
    @extend_schema(
        tags=["Leave"], summary="My leave applications", parameters=LIST_PARAMS,
        responses={200: LeaveApplicationPageSerializer, **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        try:
            actor = directory.resolve_actor(request.user)
            page = leave_selector.list_for_requester(actor.employee_id, request.query_params)
        except LeaveWorkflowError as e:
            return _fail(e)
        return _page_response(page, request)

    @extend_schema(
        tags=["Leave"], summary="Applications of my division (reviewer)", parameters=LIST_PARAMS,
        responses={200: LeaveApplicationPageSerializer, **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path="division")
    def division(self, request):
        try:
            actor = directory.resolve_actor(request.user)
            if not actor.is_reviewer:
                return Response({"detail": "Reviewer privilege required."}, status=status.HTTP_403_FORBIDDEN)
            page = leave_selector.list_for_reviewer(actor.division_id, request.query_params)
        except LeaveWorkflowError as e:
            return _fail(e)
        return _page_response(page, request)

    @extend_schema(
        tags=["Leave"], summary="All applications (approver)", parameters=LIST_PARAMS,
        responses={200: LeaveApplicationPageSerializer, **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path="all")
    def all(self, request):
        try:
            actor = directory.resolve_actor(request.user)
            if not actor.is_approver:
                return Response({"detail": "Approver privilege required."}, status=status.HTTP_403_FORBIDDEN)
            page = leave_selector.list_for_approver(request.query_params)
        except LeaveWorkflowError as e:
            return _fail(e)
        return _page_response(page, request)


class SupportingDocumentUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        tags=["Leave"],
        summary="Upload a supporting document (physician letter)",
        description="Returns the document reference to pass as `supporting_document_id` on submit. PDF/JPG/PNG, max 5 MB.",
        request={"multipart/form-data": DocumentUploadSerializer},
        responses={201: SupportingDocumentSerializer, **std_errors()},
    )
    def post(self, request):
        ser = DocumentUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            actor = directory.resolve_actor(request.user)
            doc = upload_document(uploader_id=actor.employee_id, **ser.validated_data)
        except LeaveWorkflowError as e:
            return _fail(e)
        return Response(SupportingDocumentSerializer(doc, context={"request": request}).data,
                        status=status.HTTP_201_CREATED)
