"""
Modeles SQLAlchemy - exports centralises.

Organisation:
- base: Bases declaratives (administration / point de vente)
- admin_models: Parametres et journal des resets
- pos_models: Schema metier du point de vente
"""

from pos_backoffice.infrastructure.persistence.models.base import Base, PosBase

from pos_backoffice.infrastructure.persistence.models.admin_models import (
    AppSettings,
    ResetLogRecord,
)

from pos_backoffice.infrastructure.persistence.models.pos_models import (
    MASTER_DATA_MODELS,
    TRANSACTIONAL_MODELS,
    Category,
    Customer,
    Guest,
    Product,
    Promotion,
    PromotionProduct,
    Refund,
    RefundItem,
    Sale,
    SaleItem,
    User,
)

__all__ = [
    # Bases
    "Base",
    "PosBase",
    # Administration
    "AppSettings",
    "ResetLogRecord",
    # Point de vente
    "User",
    "Category",
    "Product",
    "Customer",
    "Guest",
    "Sale",
    "SaleItem",
    "Refund",
    "RefundItem",
    "Promotion",
    "PromotionProduct",
    "MASTER_DATA_MODELS",
    "TRANSACTIONAL_MODELS",
]
