from pathlib import Path

from leavedesk.settings import EnvSettings


def test_env_values_are_typed(monkeypatch):
    monkeypatch.setenv("DJANGO_DEBUG", "off")
    monkeypatch.setenv("EMAIL_PORT", "587")
    monkeypatch.setenv("EMAIL_USE_TLS", "yes")
    monkeypatch.setenv("LEAVE_ALLOCATION_ATTEMPTS", "3")
    monkeypatch.setenv("MEDIA_ROOT", "/srv/leavedesk/media")

    env = EnvSettings()
    assert env.DJANGO_DEBUG is False
    assert env.EMAIL_PORT == 587
    assert env.EMAIL_USE_TLS is True
    assert env.LEAVE_ALLOCATION_ATTEMPTS == 3
    assert env.MEDIA_ROOT == Path("/srv/leavedesk/media")


def test_env_defaults(monkeypatch):
    for name in ("POSTGRES_DB", "LEAVE_DEFAULT_ANNUAL_QUOTA", "LARK_LEAVE_WEBHOOK_URL"):
        monkeypatch.delenv(name, raising=False)

    env = EnvSettings()
    assert env.POSTGRES_DB == ""
    assert env.LEAVE_DEFAULT_ANNUAL_QUOTA == 12
    assert env.LARK_LEAVE_WEBHOOK_URL == ""
