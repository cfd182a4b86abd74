# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import serializers
from leaves.models import Employee, LeaveApplication, SupportingDocument


# ===== Read projections (no credentials / contact e-mail) =====
class EmployeeBriefSerializer(serializers.ModelSerializer):
    division = serializers.CharField(source="division.name", read_only=True, default=None)
    position = serializers.CharField(source="position.name", read_only=True, default=None)

    class Meta:
        model = Employee
        fields = ["id", "name", "division", "position"]


class SupportingDocumentSerializer(serializers.ModelSerializer):
    url = serializers.FileField(source="file", read_only=True)

    class Meta:
        model = SupportingDocument
        fields = ["id", "kind", "original_name", "url", "uploaded_by", "created_at"]


class ReviewRecordSerializer(serializers.Serializer):
    reviewer_id = serializers.IntegerField()
    reviewed_at = serializers.DateTimeField()
    notes = serializers.CharField()


class RejectionRecordSerializer(serializers.Serializer):
    rejected_by = serializers.IntegerField()
    rejected_at = serializers.DateTimeField()
    reason = serializers.CharField()


class ApprovalRecordSerializer(serializers.Serializer):
    approval_number = serializers.CharField()
    approved_by = serializers.IntegerField()
    approved_at = serializers.DateTimeField()
    notes = serializers.CharField()


class LeaveApplicationReadSerializer(serializers.ModelSerializer):
    employee = EmployeeBriefSerializer(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    leave_type_display = serializers.CharField(source="get_leave_type_display", read_only=True)
    supporting_document = SupportingDocumentSerializer(read_only=True)
    review_record = ReviewRecordSerializer(read_only=True, allow_null=True)
    rejection_record = RejectionRecordSerializer(read_only=True, allow_null=True)
    approval_record = ApprovalRecordSerializer(read_only=True, allow_null=True)

    class Meta:
        model = LeaveApplication
        fields = [
            "id",
            "document_number",
            "issued_at",
            "employee",
            "start_date",
            "end_date",
            "day_length",
            "leave_type",
            "leave_type_display",
            "reason",
            "description",
            "supporting_document",
            "status",
            "status_display",
            "review_record",
            "rejection_record",
            "approval_record",
            "created_at",
            "updated_at",
        ]


class LeaveApplicationPageSerializer(serializers.Serializer):
    results = LeaveApplicationReadSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()


# ===== Requester writes =====
class LeaveSubmitSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    leave_type = serializers.ChoiceField(choices=LeaveApplication.LeaveType.choices)
    reason = serializers.CharField(max_length=2000)
    description = serializers.CharField(max_length=4000)
    supporting_document_id = serializers.IntegerField(required=False, allow_null=True)
    # multipart alternative: upload the physician letter in the same request
    document = serializers.FileField(required=False, write_only=True)

    def validate(self, attrs):
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date"})
        if attrs.get("document") is not None and attrs.get("supporting_document_id") is not None:
            raise serializers.ValidationError("Send either `document` or `supporting_document_id`, not both.")
        return attrs


class DocumentUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    kind = serializers.ChoiceField(
        choices=SupportingDocument.Kind.choices, required=False,
        default=SupportingDocument.Kind.PHYSICIAN_LETTER,
    )


# ===== Reviewer / approver decisions =====
class LeaveReviewSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=["reviewed", "rejected"])
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class LeaveApproveSerializer(serializers.Serializer):
    approval_number = serializers.CharField(max_length=64)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class LeaveDeclineSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
