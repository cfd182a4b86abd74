import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from leaves.models import LeaveApplication, SupportingDocument

BASE = "/api/leave/applications/"


def client_for(employee):
    c = APIClient()
    c.force_authenticate(user=employee.user)
    return c


def _annual(**extra):
    body = {
        "start_date": "2025-10-06",
        "end_date": "2025-10-10",
        "leave_type": "annual",
        "reason": "Family event",
        "description": "Visiting family",
    }
    body.update(extra)
    return body


@pytest.mark.django_db
def test_requires_authentication():
    assert APIClient().get(BASE + "mine/").status_code in (401, 403)


@pytest.mark.django_db
def test_unlinked_user_gets_incomplete_profile(django_user_model):
    user = django_user_model.objects.create_user(username="ghost", password="pass")
    c = APIClient()
    c.force_authenticate(user=user)
    r = c.get(BASE + "mine/")
    assert r.status_code == 404
    assert r.json()["detail"] == "Employee data is incomplete"


@pytest.mark.django_db
def test_full_flow_over_http(requester, reviewer, approver):
    r = client_for(requester).post(BASE, _annual(), format="json")
    assert r.status_code == 201, r.content
    body = r.json()
    assert body["status"] == "pending"
    assert body["day_length"] == 5
    assert body["document_number"].startswith("001/")
    assert "email" not in body["employee"]
    app_id = body["id"]

    r = client_for(reviewer).put(f"{BASE}{app_id}/review/", {"decision": "reviewed", "notes": "ok"}, format="json")
    assert r.status_code == 200, r.content
    assert r.json()["review_record"]["reviewer_id"] == reviewer.id

    r = client_for(approver).put(f"{BASE}{app_id}/approve/", {"approval_number": "APV-1"}, format="json")
    assert r.status_code == 200, r.content
    assert r.json()["status"] == "approved"
    assert r.json()["approval_record"]["approval_number"] == "APV-1"
    requester.refresh_from_db()
    assert requester.annual_leave_quota == 7

    r = client_for(approver).put(f"{BASE}{app_id}/approve/", {"approval_number": "APV-2"}, format="json")
    assert r.status_code == 409


@pytest.mark.django_db
def test_policy_violation_is_400(requester):
    r = client_for(requester).post(BASE, _annual(leave_type="major", start_date="2025-01-01", end_date="2025-04-01"), format="json")
    assert r.status_code == 400
    assert "exceeds 90 days" in r.json()["detail"]
    assert not LeaveApplication.objects.exists()


@pytest.mark.django_db
def test_serializer_errors_keep_drf_format(requester):
    r = client_for(requester).post(BASE, _annual(leave_type="vacation"), format="json")
    assert r.status_code == 400
    assert "leave_type" in r.json()


@pytest.mark.django_db
def test_sick_leave_with_multipart_upload(requester):
    letter = SimpleUploadedFile("letter.pdf", b"%PDF-1.4", content_type="application/pdf")
    data = _annual(leave_type="sick", start_date="2025-03-01", end_date="2025-03-03", document=letter)
    r = client_for(requester).post(BASE, data, format="multipart")
    assert r.status_code == 201, r.content
    assert r.json()["supporting_document"]["original_name"] == "letter.pdf"
    assert SupportingDocument.objects.count() == 1


@pytest.mark.django_db
def test_document_upload_endpoint(requester):
    c = client_for(requester)
    ok = c.post("/api/leave/documents/", {"file": SimpleUploadedFile("scan.png", b"\x89PNG", content_type="image/png")},
                format="multipart")
    assert ok.status_code == 201, ok.content
    doc_id = ok.json()["id"]

    bad = c.post("/api/leave/documents/", {"file": SimpleUploadedFile("notes.exe", b"MZ")}, format="multipart")
    assert bad.status_code == 400

    r = c.post(BASE, _annual(leave_type="sick", start_date="2025-03-01", end_date="2025-03-02",
                             supporting_document_id=doc_id), format="json")
    assert r.status_code == 201, r.content


@pytest.mark.django_db
def test_reviewer_outside_division_forbidden(requester, other_reviewer):
    app_id = client_for(requester).post(BASE, _annual(), format="json").json()["id"]
    r = client_for(other_reviewer).put(f"{BASE}{app_id}/review/", {"decision": "reviewed"}, format="json")
    assert r.status_code == 403


@pytest.mark.django_db
def test_decline_over_http(requester, reviewer, approver):
    app_id = client_for(requester).post(BASE, _annual(), format="json").json()["id"]
    client_for(reviewer).put(f"{BASE}{app_id}/review/", {"decision": "reviewed"}, format="json")
    r = client_for(approver).put(f"{BASE}{app_id}/decline/", {"reason": "Freeze"}, format="json")
    assert r.status_code == 200
    assert r.json()["status"] == "rejected"
    assert r.json()["rejection_record"]["reason"] == "Freeze"


@pytest.mark.django_db
def test_listings_are_scoped_by_role(requester, colleague, reviewer, approver):
    client_for(requester).post(BASE, _annual(), format="json")
    client_for(colleague).post(BASE, _annual(), format="json")

    mine = client_for(colleague).get(BASE + "mine/").json()
    assert mine["total"] == 1 and mine["page"] == 1 and mine["limit"] == 10

    assert client_for(requester).get(BASE + "division/").status_code == 403
    division = client_for(reviewer).get(BASE + "division/").json()
    assert [x["employee"]["name"] for x in division["results"]] == ["Budi Santoso"]

    assert client_for(reviewer).get(BASE + "all/").status_code == 403
    everything = client_for(approver).get(BASE + "all/", {"limit": 500, "sort_by": "employee_name", "order": "desc"})
    assert everything.status_code == 200
    assert everything.json()["limit"] == 100
    assert [x["employee"]["name"] for x in everything.json()["results"]] == ["Sari Wulandari", "Budi Santoso"]


@pytest.mark.django_db
def test_listing_rejects_unknown_leave_type(approver):
    r = client_for(approver).get(BASE + "all/", {"leave_type": "vacation"})
    assert r.status_code == 400
    assert "leave_type" in r.json()["detail"]


@pytest.mark.django_db
def test_detail_is_scoped(requester, colleague, approver):
    app_id = client_for(requester).post(BASE, _annual(), format="json").json()["id"]
    assert client_for(requester).get(f"{BASE}{app_id}/").status_code == 200
    assert client_for(approver).get(f"{BASE}{app_id}/").status_code == 200
    assert client_for(colleague).get(f"{BASE}{app_id}/").status_code == 404


@pytest.mark.django_db
def test_schema_is_served(requester):
    r = client_for(requester).get("/api/schema/")
    assert r.status_code == 200
