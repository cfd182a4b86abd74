from django.contrib import admin
from .models import (
    AuditLog, Division, DocumentSequence, Employee, LeaveApplication, Notification, Position, SupportingDocument,
)

@admin.register(Division)
class DivisionAdmin(admin.ModelAdmin):
    list_display = ("name", "description")
    search_fields = ("name",)

@admin.register(Position)
class PositionAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)

@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("name", "division", "position", "role", "annual_leave_quota")
    list_filter = ("role", "division", "position")
    search_fields = ("name", "email")
    raw_id_fields = ("user",)

@admin.register(LeaveApplication)
class LeaveApplicationAdmin(admin.ModelAdmin):
    list_display = ("document_number", "employee", "leave_type", "start_date", "end_date", "day_length", "status")
    list_filter = ("status", "leave_type", "document_year")
    search_fields = ("document_number", "employee__name")
    # state changes go through the workflow services only
    readonly_fields = [f.name for f in LeaveApplication._meta.fields]

    def has_add_permission(self, request):
        return False

@admin.register(SupportingDocument)
class SupportingDocumentAdmin(admin.ModelAdmin):
    list_display = ("id", "kind", "original_name", "uploaded_by", "created_at")

@admin.register(DocumentSequence)
class DocumentSequenceAdmin(admin.ModelAdmin):
    list_display = ("year", "last_number", "updated_at")
    readonly_fields = ("year", "last_number")

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("event", "channel", "audience", "audience_ref", "delivered", "attempt_count", "created_at")
    list_filter = ("channel", "delivered", "audience")

@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "object_type", "object_id", "actor_employee_id", "created_at")
    list_filter = ("action",)
