import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, BigIntegerPK, CreatedAtMixin

if TYPE_CHECKING:
    from storefront.models.order import Order
    from storefront.models.shipping_address import ShippingAddress


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    ERASED = "erased"  # Terminal, set only by the anonymization engine


class User(Base, CreatedAtMixin):
    """Customer account.

    Invariant: status == ERASED exactly when anonymized_time is set, and then
    first_name, last_name, username and anon_tag all hold the same
    anonymized label.
    """

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    username: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    # Right-to-erasure bookkeeping
    anonymized_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    anon_tag: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[UserStatus] = mapped_column(
        Enum(
            UserStatus,
            native_enum=False,
            length=16,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=UserStatus.ACTIVE,
        server_default=UserStatus.ACTIVE.value,
        nullable=False,
    )

    # Relationships
    shipping_addresses: Mapped[list["ShippingAddress"]] = relationship(
        "ShippingAddress", back_populates="user"
    )
    orders: Mapped[list["Order"]] = relationship("Order", back_populates="user")

    @property
    def is_erased(self) -> bool:
        """Check if the user has gone through right-to-erasure."""
        return self.status == UserStatus.ERASED or self.anonymized_time is not None
