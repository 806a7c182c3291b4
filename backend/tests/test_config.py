import pytest

from rentdesk.core.config import Settings
from rentdesk.core.env_validation import ProductionSettings, validate_environment


def test_settings_normalise_and_derive():
    settings = Settings(
        _env_file=None,
        log_level=" debug ",
        allowed_origins="https://app.rentdesk.io, https://admin.rentdesk.io,",
        max_upload_size_mb=2,
    )

    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://app.rentdesk.io", "https://admin.rentdesk.io"]
    assert settings.max_upload_bytes == 2 * 1024 * 1024
    assert settings.bucket_name == "rentdesk-test"


def test_settings_reject_non_positive_terms():
    with pytest.raises(ValueError):
        Settings(_env_file=None, default_lease_term_days=0)


def test_missing_bucket_for_provider():
    settings = Settings(_env_file=None, storage_provider="s3", s3_bucket_name=None)
    with pytest.raises(ValueError, match="S3_BUCKET_NAME"):
        settings.bucket_name


def test_production_rules_are_all_reported():
    settings = ProductionSettings(
        _env_file=None,
        debug=False,
        allowed_origins="*",
        storage_provider="s3",
        s3_bucket_name=None,
        google_application_credentials="/nowhere/firebase.json",
        database_url="sqlite+aiosqlite:///:memory:",
    )

    problems = settings.problems()

    assert len(problems) == 4
    assert problems[0].startswith("Wildcard CORS origin")
    assert "S3_BUCKET_NAME" in problems[1]
    assert problems[2] == "Firebase credentials file not found: /nowhere/firebase.json"
    assert problems[3].startswith("DATABASE_URL must be a PostgreSQL")


def test_validate_environment_exits(monkeypatch):
    # The test database is SQLite, which production refuses
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    with pytest.raises(SystemExit) as exc:
        validate_environment()
    assert exc.value.code == 1
