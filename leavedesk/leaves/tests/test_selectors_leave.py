import pytest
from datetime import date

from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from leaves.exceptions import NotFoundError, ValidationError
from leaves.models import LeaveApplication
from leaves.selectors import leave_selector
from leaves.services import leave_service
from leaves.utils.pagination import LeavePagination


@pytest.fixture
def seeded(requester, colleague, reviewer, submit_annual):
    """3 applications in Engineering (Budi), 1 in Finance (Sari)."""
    a = submit_annual(days=1, start=date(2025, 3, 10))
    b = submit_annual(days=2, start=date(2025, 1, 6))
    c = submit_annual(days=3, start=date(2025, 6, 2))
    d = submit_annual(days=1, employee=colleague, start=date(2025, 2, 3))
    leave_service.review(application_id=b.id, reviewer_id=reviewer.id, decision="reviewed")
    return {"a": a, "b": b, "c": c, "d": d}


def _ids(page):
    return [x.id for x in page.items]


@pytest.mark.django_db
def test_scopes(seeded, requester, colleague, org):
    mine = leave_selector.list_for_requester(colleague.id, {})
    assert _ids(mine) == [seeded["d"].id]

    division = leave_selector.list_for_reviewer(org["eng"].id, {})
    assert division.total == 3
    assert set(_ids(division)) == {seeded["a"].id, seeded["b"].id, seeded["c"].id}

    everything = leave_selector.list_for_approver({})
    assert everything.total == 4


@pytest.mark.django_db
def test_default_sort_is_issue_order(seeded):
    page = leave_selector.list_for_approver({})
    assert _ids(page) == [seeded[k].id for k in ("a", "b", "c", "d")]


@pytest.mark.django_db
def test_sort_and_filters(seeded):
    by_start = leave_selector.list_for_approver({"sort_by": "start_date", "order": "desc"})
    assert _ids(by_start) == [seeded["c"].id, seeded["a"].id, seeded["d"].id, seeded["b"].id]

    ranged = leave_selector.list_for_approver({"start_from": "2025-02-01", "start_to": "2025-03-31"})
    assert set(_ids(ranged)) == {seeded["a"].id, seeded["d"].id}

    assert _ids(leave_selector.list_for_approver({"status": "reviewed"})) == [seeded["b"].id]
    assert _ids(leave_selector.list_for_approver({"employee_name": "wulan"})) == [seeded["d"].id]
    assert leave_selector.list_for_approver({"division": "ENGINEER"}).total == 3
    assert leave_selector.list_for_approver({"leave_type": "sick"}).total == 0


@pytest.mark.django_db
def test_pagination_total_matches_filter(seeded):
    page = leave_selector.list_for_approver({"division": "engineering", "limit": "2", "page": "2"})
    assert page.total == 3
    assert page.limit == 2
    assert len(page.items) == 1

    beyond = leave_selector.list_for_approver({"limit": "2", "page": "9"})
    assert beyond.total == 4
    assert beyond.items == []


@pytest.mark.django_db
def test_limit_is_clamped(seeded):
    assert leave_selector.list_for_approver({"limit": "500"}).limit == 100
    assert leave_selector.list_for_approver({"limit": "0"}).limit == 1
    assert leave_selector.list_for_approver({}).limit == 10


@pytest.mark.django_db
@pytest.mark.parametrize("params", [
    {"leave_type": "vacation"},
    {"status": "cancelled"},
    {"start_from": "03/10/2025"},
    {"start_from": "2025-02-30"},
    {"start_from": "2025-05-01", "start_to": "2025-04-01"},
    {"sort_by": "email"},
    {"order": "sideways"},
    {"page": "0"},
    {"limit": "ten"},
])
def test_invalid_filters_fail_before_any_query(django_assert_num_queries, params):
    with django_assert_num_queries(0):
        with pytest.raises(ValidationError):
            leave_selector.list_for_approver(params)


@pytest.mark.django_db
def test_reviewer_without_division():
    with pytest.raises(NotFoundError):
        leave_selector.list_for_reviewer(None, {})


@pytest.mark.django_db
def test_pagination_reads_page_and_limit_from_request(seeded):
    request = Request(APIRequestFactory().get("/", {"page": "2", "limit": "3"}))
    pager = LeavePagination()
    assert pager.get_page_size(request) == 3

    items = pager.paginate_queryset(LeaveApplication.objects.order_by("issued_at"), request)
    assert [x.id for x in items] == [seeded["d"].id]
    assert pager.get_paginated_response([]).data == {"results": [], "total": 4, "page": 2, "limit": 3}

    with pytest.raises(ValidationError):
        LeavePagination().get_page_size(Request(APIRequestFactory().get("/", {"limit": "many"})))
