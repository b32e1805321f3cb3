"""
Modeles SQLAlchemy du point de vente.

Donnees de reference (conservees par un reset partiel):
    users, categories, products

Donnees transactionnelles (videes par un reset partiel):
    customers, guests, sales, sale_items, refunds, refund_items,
    promotions, promotion_products
"""
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text,
)

from pos_backoffice.infrastructure.persistence.models.base import PosBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# DONNEES DE REFERENCE
# ═══════════════════════════════════════════════════════════════════════════════

class User(PosBase):
    """Table users - Comptes caisse et administration"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="cashier")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class Category(PosBase):
    """Table categories - Categories de produits"""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)


class Product(PosBase):
    """Table products - Catalogue"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    name = Column(String(150), nullable=False)
    sku = Column(String(50), unique=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    cost_price = Column(Numeric(12, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    image_url = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index('idx_products_category', 'category_id'),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# DONNEES TRANSACTIONNELLES
# ═══════════════════════════════════════════════════════════════════════════════

class Customer(PosBase):
    """Table customers - Clients fideles"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    phone = Column(String(30))
    email = Column(String(255))
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class Guest(PosBase):
    """Table guests - Clients de passage"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(100))
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class Sale(PosBase):
    """Table sales - Tickets de caisse"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=True)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    payment_method = Column(String(20), nullable=False, default="cash")
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index('idx_sales_created', 'created_at'),
    )


class SaleItem(PosBase):
    """Table sale_items - Lignes de ticket"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)


class Refund(PosBase):
    """Table refunds - Remboursements"""
    __tablename__ = "refunds"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    reason = Column(Text)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class RefundItem(PosBase):
    """Table refund_items - Lignes de remboursement"""
    __tablename__ = "refund_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    refund_id = Column(Integer, ForeignKey("refunds.id"), nullable=False)
    sale_item_id = Column(Integer, ForeignKey("sale_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)


class Promotion(PosBase):
    """Table promotions - Remises temporaires"""
    __tablename__ = "promotions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    discount_percent = Column(Numeric(5, 2), nullable=False, default=0)
    starts_at = Column(DateTime(timezone=True))
    ends_at = Column(DateTime(timezone=True))


class PromotionProduct(PosBase):
    """Table promotion_products - Produits concernes par une promotion"""
    __tablename__ = "promotion_products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    promotion_id = Column(Integer, ForeignKey("promotions.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)


MASTER_DATA_MODELS = (User, Category, Product)

# Ordre de suppression: enfants avant parents
TRANSACTIONAL_MODELS = (
    RefundItem,
    SaleItem,
    PromotionProduct,
    Promotion,
    Refund,
    Sale,
    Guest,
    Customer,
)
