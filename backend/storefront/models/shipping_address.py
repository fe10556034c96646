from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, BigIntegerPK

if TYPE_CHECKING:
    from storefront.models.user import User


class ShippingAddress(Base):
    __tablename__ = "shipping_addresses"

    shipping_address_id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id"), nullable=False
    )
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # city, zip and state are nulled on erasure, not replaced
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(20), nullable=True)
    state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="shipping_addresses")
