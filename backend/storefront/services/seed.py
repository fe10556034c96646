"""Demo seed data for a fresh storefront database."""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.models import (
    Category,
    Order,
    OrderItem,
    Payment,
    Product,
    ShippingAddress,
    User,
)

logger = logging.getLogger(__name__)


def seed_demo_data(db: Session) -> User | None:
    """Insert one customer with an address, a paid order and its payment.

    Does nothing when the users table already has rows.

    Returns:
        The seeded user, or None if seeding was skipped.
    """
    existing = db.execute(select(func.count()).select_from(User)).scalar_one()
    if existing:
        logger.info("Users table not empty, skipping demo seed")
        return None

    user = User(
        first_name="Alice",
        last_name="Carter",
        username="alicec",
        email="alice@example.com",
        password_hash=b"\x01",
    )
    category = Category(name="Shoes")
    db.add_all([user, category])
    db.flush()

    product = Product(
        product_name="Red Shoe",
        price=Decimal("79.00"),
        category_id=category.category_id,
        created_by_user_id=user.user_id,
    )
    address = ShippingAddress(
        user_id=user.user_id,
        street="123 Peachtree St",
        city="Atlanta",
        zip="30303",
        state="GA",
        phone_number="+1-404-555-1234",
    )
    db.add_all([product, address])
    db.flush()

    order = Order(
        user_id=user.user_id,
        shipping_address_id=address.shipping_address_id,
        email_snapshot="alice@example.com",
        shipping_name="Alice Carter",
        shipping_address="123 Peachtree St",
        shipping_city="Atlanta",
        shipping_state="GA",
        shipping_zip="30303",
        ship_country="US",
        tax=Decimal("6.00"),
        shipping_price=Decimal("5.00"),
        is_delivered=False,
        is_paid=True,
        total_cost=Decimal("90.00"),
    )
    db.add(order)
    db.flush()

    db.add_all(
        [
            OrderItem(
                order_id=order.order_id,
                product_id=product.product_id,
                quantity=1,
                price=Decimal("79.00"),
            ),
            Payment(
                order_id=order.order_id,
                psp_ref="ch_123",
                last4="4242",
                billing_name="Alice Carter",
                billing_address="123 Peachtree St",
            ),
        ]
    )
    db.commit()

    logger.info(f"Seeded demo user {user.user_id}")
    return user
