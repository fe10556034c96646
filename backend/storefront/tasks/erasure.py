"""Background right-to-erasure tasks.

Erasure requests accepted elsewhere are queued here so the slow key-stretching
step runs outside the request path. The engine never retries on its own; this
task does, and a retry after a partial failure is safe because the engine
rolls back on failure and no-ops on already-erased users.
"""

import logging
from typing import Any

from storefront.core.celery_app import celery_app
from storefront.core.logging import request_context
from storefront.services.anonymization import StorageFailure, anonymize_user

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)  # type: ignore[misc]
def anonymize_user_task(self: Any, user_id: int) -> dict[str, Any]:
    """Anonymize a user (GDPR Article 17 - Right to Erasure).

    Returns:
        Dict with the status and the requested user id. Unknown and
        already-erased users report success as well.
    """
    with request_context(self.request.id):
        try:
            anonymize_user(user_id)
        except StorageFailure as e:
            logger.error(f"Erasure of user {user_id} failed, scheduling retry: {e}")
            raise self.retry(exc=e)

    return {"status": "success", "user_id": user_id}


@celery_app.task  # type: ignore[misc]
def anonymize_users(user_ids: list[int]) -> dict[str, Any]:
    """Anonymize several users one transaction at a time.

    Each user runs through anonymize_user_task inline, retries included.
    A failure for one user does not stop the others.

    Returns:
        Combined results keyed by user id.
    """
    results: dict[str, Any] = {}

    for user_id in user_ids:
        try:
            result = anonymize_user_task.apply(args=[user_id])
            results[str(user_id)] = result.get(disable_sync_subtasks=False)
        except Exception as e:
            logger.error(f"Erasure of user {user_id} failed: {e}")
            results[str(user_id)] = {"status": "error", "error": str(e)}

    return results
