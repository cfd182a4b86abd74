import threading
from datetime import date, timedelta

import pytest
from django.db import connections

from leaves.exceptions import QuotaExhausted
from leaves.models import Employee, LeaveApplication
from leaves.services import leave_service


def _run_concurrently(fns):
    """Start all callables at the same time; returns [(result, exception)] in input order."""
    barrier = threading.Barrier(len(fns))
    out = [None] * len(fns)

    def _worker(i, fn):
        try:
            barrier.wait(timeout=10)
            out[i] = (fn(), None)
        except Exception as ex:
            out[i] = (None, ex)
        finally:
            connections.close_all()

    threads = [threading.Thread(target=_worker, args=(i, fn)) for i, fn in enumerate(fns)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return out


@pytest.mark.django_db(transaction=True)
def test_concurrent_submissions_get_contiguous_numbers(requester):
    n = 8
    start = date(2025, 11, 3)

    def _submit(i):
        return lambda: leave_service.submit(
            employee_id=requester.id,
            start_date=start + timedelta(days=i),
            end_date=start + timedelta(days=i),
            leave_type="annual",
            reason="r",
            description="d",
        ).document_seq

    results = _run_concurrently([_submit(i) for i in range(n)])

    assert [ex for _, ex in results if ex is not None] == []
    seqs = sorted(seq for seq, _ in results)
    assert seqs == list(range(1, n + 1))
    assert LeaveApplication.objects.count() == n
    # issuance order follows the numbers
    issued = list(LeaveApplication.objects.order_by("issued_at", "document_seq").values_list("document_seq", flat=True))
    assert issued == sorted(issued)


@pytest.mark.django_db(transaction=True)
def test_concurrent_approvals_cannot_overdraw_allowance(requester, reviewer, approver, submit_annual):
    Employee.objects.filter(pk=requester.pk).update(annual_leave_quota=5)
    first = submit_annual(days=5, start=date(2025, 11, 3))
    second = submit_annual(days=5, start=date(2025, 12, 1))
    for lv in (first, second):
        leave_service.review(application_id=lv.id, reviewer_id=reviewer.id, decision="reviewed")

    def _approve(lv, number):
        return lambda: leave_service.approve(application_id=lv.id, approver_id=approver.id, approval_number=number).id

    results = _run_concurrently([_approve(first, "A-1"), _approve(second, "A-2")])

    successes = [r for r, ex in results if ex is None]
    failures = [ex for _, ex in results if ex is not None]
    assert len(successes) == 1
    assert len(failures) == 1 and isinstance(failures[0], QuotaExhausted)

    requester.refresh_from_db()
    assert requester.annual_leave_quota == 0
    statuses = sorted(LeaveApplication.objects.values_list("status", flat=True))
    assert statuses == ["approved", "reviewed"]
