from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, BigIntegerPK, CreatedAtMixin


class Category(Base):
    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)

    products: Mapped[list["Product"]] = relationship("Product", back_populates="category")


class Product(Base, CreatedAtMixin):
    __tablename__ = "products"

    product_id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), server_default="0", nullable=False
    )
    count_in_stock: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    category_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("categories.category_id"), nullable=True
    )
    # Kept as a plain reference; erasure never rewrites catalog rows
    created_by_user_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.user_id"), nullable=True
    )

    category: Mapped["Category | None"] = relationship("Category", back_populates="products")
