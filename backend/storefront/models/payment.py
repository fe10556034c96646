from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, BigIntegerPK, CreatedAtMixin

if TYPE_CHECKING:
    from storefront.models.order import Order


class Payment(Base, CreatedAtMixin):
    __tablename__ = "payments"

    payment_id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("orders.order_id"),
        nullable=False,
        index=True,
    )
    # Processor reference and card suffix are kept for reconciliation
    psp_ref: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last4: Mapped[str | None] = mapped_column(String(4), nullable=True)
    billing_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    billing_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="payments")
