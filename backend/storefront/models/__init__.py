# Database models
from storefront.models.admin import Admin
from storefront.models.base import Base
from storefront.models.catalog import Category, Product
from storefront.models.order import Order, OrderItem
from storefront.models.payment import Payment
from storefront.models.shipping_address import ShippingAddress
from storefront.models.user import User, UserStatus

__all__ = [
    "Base",
    "Admin",
    "Category",
    "Product",
    "User",
    "UserStatus",
    "ShippingAddress",
    "Order",
    "OrderItem",
    "Payment",
]
