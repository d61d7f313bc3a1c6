# services/errors.py
import logging

from extensions import db

logger = logging.getLogger(__name__)

YEAR_COLUMN_HINT = (
    "DATABASE ERROR: The 'year' column is missing in your pastpaper tables. "
    "Add it with: ALTER TABLE grade9_pastpapers ADD COLUMN year TEXT;"
)
PERMISSION_HINT = (
    "PERMISSION DENIED: the database role is not allowed to perform this action. "
    "Ensure UPDATE/DELETE privileges exist for the application role."
)

# Postgres SQLSTATE for insufficient_privilege
INSUFFICIENT_PRIVILEGE = "42501"


class ServiceError(Exception):
    """A failure that is safe to show to the user as-is."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class QuizParseError(ServiceError):
    pass


def _sqlstate(exc):
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def wrap_db_error(exc, context):
    """Roll back, log and translate a database exception into a ServiceError."""
    db.session.rollback()
    logger.error("Database error [%s]: %s", context, exc)

    text = str(getattr(exc, "orig", None) or exc)
    lowered = text.lower()
    if "year" in lowered and ("does not exist" in lowered or "no such column" in lowered
                              or "has no column" in lowered):
        return ServiceError(YEAR_COLUMN_HINT)
    if _sqlstate(exc) == INSUFFICIENT_PRIVILEGE:
        return ServiceError(PERMISSION_HINT)
    if text:
        return ServiceError(text)
    return ServiceError(f"An error occurred during {context}.")
