# Business logic services
from storefront.services.anonymization import (
    AnonymizationEngine,
    ErasureError,
    StorageFailure,
    anonymize_user,
    get_anonymization_engine,
)
from storefront.services.digest import stretch

__all__ = [
    "AnonymizationEngine",
    "ErasureError",
    "StorageFailure",
    "anonymize_user",
    "get_anonymization_engine",
    "stretch",
]
