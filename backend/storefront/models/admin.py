from sqlalchemy import LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, BigIntegerPK, CreatedAtMixin


class Admin(Base, CreatedAtMixin):
    __tablename__ = "admins"

    admin_id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
