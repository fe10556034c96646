"""Right-to-erasure: irreversible anonymization of a user and dependent records.

A single call scrubs the user's personal fields and every copy of them held by
shipping addresses, order snapshots and payment billing details. Financial
data (totals, taxes, processor references, card suffixes, order items) is
left intact so bookkeeping keeps reconciling.

The whole cascade runs in one transaction with the user row locked, so a
concurrent caller for the same user waits and then sees the erased state.
Erasure is terminal: an erased or unknown user is a silent no-op.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import ANON_TAG_COLUMN_LENGTH, ANON_TAG_PREFIX, settings
from storefront.models import Order, Payment, ShippingAddress, User, UserStatus
from storefront.services.digest import build_label_source, derive_anon_tag, stretch

logger = logging.getLogger(__name__)


class ErasureError(Exception):
    """Base exception for erasure errors."""

    pass


class StorageFailure(ErasureError):
    """The store failed mid-erasure; the transaction was rolled back."""

    pass


class ErasureOutcome(str, Enum):
    ERASED = "erased"
    NOT_FOUND = "not_found"
    ALREADY_ERASED = "already_erased"


@dataclass(frozen=True)
class UserSnapshot:
    """Personal fields and erasure state of a locked user row."""

    user_id: int
    email: str | None
    first_name: str | None
    last_name: str | None
    username: str | None
    status: UserStatus
    anonymized_time: datetime | None

    @property
    def is_erased(self) -> bool:
        return self.status == UserStatus.ERASED or self.anonymized_time is not None


class ErasureUnitOfWork(ABC):
    """Scoped reads and writes available inside one erasure transaction."""

    @abstractmethod
    def lock_user(self, user_id: int) -> UserSnapshot | None:
        """Exclusively lock the user row and read it. None if it does not exist."""
        pass

    @abstractmethod
    def scrub_user(self, user_id: int, anon_tag: str, email: str, erased_at: datetime) -> None:
        pass

    @abstractmethod
    def scrub_shipping_addresses(self, user_id: int, anon_tag: str) -> int:
        pass

    @abstractmethod
    def scrub_orders(self, user_id: int, anon_tag: str, email: str) -> int:
        pass

    @abstractmethod
    def scrub_payments(self, user_id: int, anon_tag: str) -> int:
        """Scrub payments of every order owned by the user."""
        pass


class ErasureStore(ABC):
    """Storage capability the engine depends on."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[ErasureUnitOfWork]:
        """Open a transaction that commits on clean exit and rolls back otherwise.

        Storage errors must surface as StorageFailure.
        """
        pass


class SqlAlchemyUnitOfWork(ErasureUnitOfWork):
    """Erasure statements on a SQLAlchemy session.

    Updates are issued as bulk statements, not through loaded ORM objects,
    so nothing in the identity map needs synchronizing.
    """

    _bulk = {"synchronize_session": False}

    def __init__(self, session: Session) -> None:
        self.session = session

    def lock_user(self, user_id: int) -> UserSnapshot | None:
        stmt = (
            select(
                User.user_id,
                User.email,
                User.first_name,
                User.last_name,
                User.username,
                User.status,
                User.anonymized_time,
            )
            .where(User.user_id == user_id)
            .with_for_update()
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return UserSnapshot(
            user_id=row.user_id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            username=row.username,
            status=UserStatus(row.status),
            anonymized_time=row.anonymized_time,
        )

    def scrub_user(self, user_id: int, anon_tag: str, email: str, erased_at: datetime) -> None:
        stmt = (
            update(User)
            .where(User.user_id == user_id)
            .values(
                first_name=anon_tag,
                last_name=anon_tag,
                username=anon_tag,
                email=email,
                anonymized_time=erased_at,
                anon_tag=anon_tag,
                status=UserStatus.ERASED,
            )
            .execution_options(**self._bulk)
        )
        self.session.execute(stmt)

    def scrub_shipping_addresses(self, user_id: int, anon_tag: str) -> int:
        stmt = (
            update(ShippingAddress)
            .where(ShippingAddress.user_id == user_id)
            .values(
                street=anon_tag,
                phone_number=anon_tag,
                city=None,
                state=None,
                zip=None,
            )
            .execution_options(**self._bulk)
        )
        return self._rowcount(self.session.execute(stmt))

    def scrub_orders(self, user_id: int, anon_tag: str, email: str) -> int:
        stmt = (
            update(Order)
            .where(Order.user_id == user_id)
            .values(
                email_snapshot=email,
                shipping_name=anon_tag,
                shipping_address=anon_tag,
                shipping_city=None,
                shipping_state=None,
                shipping_zip=None,
            )
            .execution_options(**self._bulk)
        )
        return self._rowcount(self.session.execute(stmt))

    def scrub_payments(self, user_id: int, anon_tag: str) -> int:
        owned_orders = select(Order.order_id).where(Order.user_id == user_id)
        stmt = (
            update(Payment)
            .where(Payment.order_id.in_(owned_orders))
            .values(billing_name=anon_tag, billing_address=anon_tag)
            .execution_options(**self._bulk)
        )
        return self._rowcount(self.session.execute(stmt))

    @staticmethod
    def _rowcount(result: Any) -> int:
        return int(getattr(result, "rowcount", 0) or 0)


class SqlAlchemyErasureStore(ErasureStore):
    """ErasureStore backed by a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session] | Callable[[], Session]) -> None:
        self.session_factory = session_factory

    @contextmanager
    def transaction(self) -> Iterator[ErasureUnitOfWork]:
        session = self.session_factory()
        try:
            yield SqlAlchemyUnitOfWork(session)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageFailure(f"Erasure transaction failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class AnonymizationEngine:
    """Irreversibly anonymizes users through an injected ErasureStore.

    Args:
        store: Transactional access to users and their dependent records.
        hash_rounds: Extra SHA-256 rounds applied when deriving the label.
        tag_length: Hex characters of the digest kept in the label.
        salt_bytes: Size of the per-call random salt (never stored).
        email_domain: Domain of the replacement email address.
        clock: Source of the anonymized_time timestamp.
    """

    def __init__(
        self,
        store: ErasureStore,
        hash_rounds: int = 30000,
        tag_length: int = 12,
        salt_bytes: int = 32,
        email_domain: str = "example.invalid",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if tag_length < 1:
            raise ValueError(f"tag_length must be positive, got {tag_length}")
        if len(ANON_TAG_PREFIX) + tag_length > ANON_TAG_COLUMN_LENGTH:
            raise ValueError(
                f"tag_length {tag_length} overflows the {ANON_TAG_COLUMN_LENGTH}-character tag columns"
            )
        if salt_bytes < 32:
            raise ValueError(f"salt_bytes must be at least 32 (256 bits), got {salt_bytes}")

        self.store = store
        self.hash_rounds = hash_rounds
        self.tag_length = tag_length
        self.salt_bytes = salt_bytes
        self.email_domain = email_domain
        self.clock = clock or (lambda: datetime.now(UTC))

    def anonymize_user(self, user_id: int) -> None:
        """Erase a user's personal data across all records that reference it.

        Returns None whether the user was erased, already erased or unknown;
        re-read the user's status to tell them apart.

        Raises:
            StorageFailure: The store failed; nothing was changed and the call
                can be retried.
        """
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            self._log_outcome(user_id, ErasureOutcome.NOT_FOUND)
            return

        with self.store.transaction() as uow:
            snapshot = uow.lock_user(user_id)
            if snapshot is None:
                self._log_outcome(user_id, ErasureOutcome.NOT_FOUND)
                return

            if snapshot.is_erased:
                self._log_outcome(user_id, ErasureOutcome.ALREADY_ERASED)
                return

            anon_tag = self._derive_anon_tag(snapshot)
            anon_email = f"{anon_tag}@{self.email_domain}"

            # Fixed top-down order: User -> ShippingAddress -> Order -> Payment
            uow.scrub_user(user_id, anon_tag, anon_email, self.clock())
            addresses = uow.scrub_shipping_addresses(user_id, anon_tag)
            orders = uow.scrub_orders(user_id, anon_tag, anon_email)
            payments = uow.scrub_payments(user_id, anon_tag)

        self._log_outcome(
            user_id,
            ErasureOutcome.ERASED,
            anon_tag=anon_tag,
            shipping_addresses=addresses,
            orders=orders,
            payments=payments,
        )

    def _derive_anon_tag(self, snapshot: UserSnapshot) -> str:
        salt = secrets.token_bytes(self.salt_bytes)
        label_source = build_label_source(
            snapshot.email,
            snapshot.first_name,
            snapshot.last_name,
            snapshot.username,
            salt.hex(),
        )
        digest = stretch(label_source, self.hash_rounds)
        return derive_anon_tag(digest, self.tag_length, prefix=ANON_TAG_PREFIX)

    @staticmethod
    def _log_outcome(user_id: Any, outcome: ErasureOutcome, **fields: Any) -> None:
        logger.info(
            f"Erasure for user {user_id}: {outcome.value}",
            extra={"extra_fields": {"user_id": user_id, "outcome": outcome.value, **fields}},
        )


# Engine factory and singleton

_anonymization_engine: AnonymizationEngine | None = None


def get_anonymization_engine() -> AnonymizationEngine:
    """Get the engine bound to the application database and settings."""
    global _anonymization_engine

    if _anonymization_engine is None:
        from storefront.core.database import SessionLocal

        _anonymization_engine = AnonymizationEngine(
            SqlAlchemyErasureStore(SessionLocal),
            hash_rounds=settings.ANONYMIZATION_HASH_ROUNDS,
            tag_length=settings.ANONYMIZATION_TAG_LENGTH,
            salt_bytes=settings.ANONYMIZATION_SALT_BYTES,
            email_domain=settings.ANONYMIZATION_EMAIL_DOMAIN,
        )

    return _anonymization_engine


def reset_anonymization_engine() -> None:
    """Reset the engine singleton (useful for testing)."""
    global _anonymization_engine
    _anonymization_engine = None


def anonymize_user(user_id: int) -> None:
    """Anonymize a user with the application engine. See AnonymizationEngine.anonymize_user."""
    get_anonymization_engine().anonymize_user(user_id)
