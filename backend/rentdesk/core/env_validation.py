"""
Runtime Environment Validation Module

Checks the deployment environment before the API accepts traffic.
Any problem stops the process with exit code 1.

Run standalone with ``python -m rentdesk.core.env_validation``.
"""

import logging
import os
import sys
from typing import List

from pydantic import ValidationError

from rentdesk.core.config import Settings, StorageProvider

logger = logging.getLogger(__name__)


class ProductionSettings(Settings):
    """
    Settings with the deployment rules applied on top.

    ALLOWED_ORIGINS has no default here: a deployment must name its frontends.
    """

    allowed_origins: str

    def problems(self) -> List[str]:
        found = []

        if not self.debug and "*" in self.cors_origins:
            found.append("Wildcard CORS origin (*) is not allowed outside debug. Set ALLOWED_ORIGINS to specific domains.")

        if self.storage_provider == StorageProvider.GCS:
            if not self.gcs_bucket_name or not self.gcs_project_id:
                found.append("GCS_BUCKET_NAME and GCS_PROJECT_ID required when STORAGE_PROVIDER=gcs")
        elif not (self.s3_bucket_name and self.aws_access_key_id and self.aws_secret_access_key):
            found.append("S3_BUCKET_NAME, AWS_ACCESS_KEY_ID, and AWS_SECRET_ACCESS_KEY required when STORAGE_PROVIDER=s3")

        creds = self.google_application_credentials
        if creds and not os.path.exists(creds):
            found.append(f"Firebase credentials file not found: {creds}")

        if not self.database_url.startswith("postgresql"):
            found.append("DATABASE_URL must be a PostgreSQL connection string (postgresql:// or postgresql+asyncpg://)")

        return found


def _exit_with(messages: List[str]) -> None:
    for message in messages:
        logger.critical("[ENV] %s", message)
    print("❌ FATAL: Environment validation failed", file=sys.stderr)
    for message in messages:
        print(f"   • {message}", file=sys.stderr)
    print("\nPlease check your .env file or environment variables.", file=sys.stderr)
    sys.exit(1)


def validate_environment() -> ProductionSettings:
    """
    Validate the environment at startup.

    Returns:
        ProductionSettings: the validated settings

    Raises:
        SystemExit: when a variable is missing or a deployment rule fails
    """
    try:
        settings = ProductionSettings()
    except ValidationError as e:
        _exit_with(
            [f"{' -> '.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in e.errors()]
        )

    problems = settings.problems()
    if problems:
        _exit_with(problems)

    logger.info(
        "[ENV] Validation passed (app=%s debug=%s storage=%s origins=%s)",
        settings.app_name,
        settings.debug,
        settings.storage_provider.value,
        ",".join(settings.cors_origins),
    )
    return settings


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")
