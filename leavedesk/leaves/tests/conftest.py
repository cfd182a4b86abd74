import pytest
from datetime import date
from django.contrib.auth import get_user_model
from leaves.models import Division, Position, Employee

User = get_user_model()

@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")
    settings.LARK_LEAVE_WEBHOOK_URL = ""

@pytest.fixture
def org(db):
    eng = Division.objects.create(name="Engineering")
    fin = Division.objects.create(name="Finance")
    manager = Position.objects.create(name="Manager")
    director = Position.objects.create(name="Director")
    staff = Position.objects.create(name="Staff")
    return {"eng": eng, "fin": fin, "manager": manager, "director": director, "staff": staff}

def _employee(username, name, email, division, position, role=Employee.Role.USER, **extra):
    user = User.objects.create_user(username=username, password="pass")
    return Employee.objects.create(
        user=user, name=name, email=email, division=division, position=position, role=role, **extra
    )

@pytest.fixture
def requester(org):
    # annual_leave_quota comes from LEAVE_WORKFLOW["DEFAULT_ANNUAL_QUOTA"] (12)
    return _employee("budi", "Budi Santoso", "budi@example.com", org["eng"], org["staff"])

@pytest.fixture
def colleague(org):
    return _employee("sari", "Sari Wulandari", "sari@example.com", org["fin"], org["staff"])

@pytest.fixture
def reviewer(org):
    return _employee("rina", "Rina Manager", "rina@example.com", org["eng"], org["manager"], role=Employee.Role.ADMIN)

@pytest.fixture
def other_reviewer(org):
    return _employee("fajar", "Fajar Manager", "fajar@example.com", org["fin"], org["manager"], role=Employee.Role.ADMIN)

@pytest.fixture
def approver(org):
    return _employee("dewi", "Dewi Director", "dewi@example.com", org["eng"], org["director"], role=Employee.Role.ADMIN)

@pytest.fixture
def sick_letter(requester):
    from django.core.files.uploadedfile import SimpleUploadedFile
    from leaves.services.document_service import upload_document
    f = SimpleUploadedFile("letter.pdf", b"%PDF-1.4 physician letter", content_type="application/pdf")
    return upload_document(file=f, uploader_id=requester.id)

@pytest.fixture
def submit_annual(requester):
    from leaves.services.leave_service import submit

    def _submit(days=5, employee=None, start=date(2025, 10, 6)):
        from datetime import timedelta
        return submit(
            employee_id=(employee or requester).id,
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            leave_type="annual",
            reason="Family event",
            description="Visiting family",
        )
    return _submit
