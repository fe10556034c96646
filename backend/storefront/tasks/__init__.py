# Celery tasks
from storefront.tasks.erasure import anonymize_user_task, anonymize_users

__all__ = [
    "anonymize_user_task",
    "anonymize_users",
]
