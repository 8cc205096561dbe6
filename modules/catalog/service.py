"""
Catalog Module - Service Layer
================================
Read-only product lookup consumed by the cart and checkout.
"""

from typing import Optional

from sqlalchemy.orm import Session

from common.helpers import safe_int
from modules.catalog.models import Product


class CatalogService:

    def find_by_id(self, db: Session, product_id) -> Optional[Product]:
        """Return the active product with this id, or None (also for malformed ids)."""
        product_id = safe_int(product_id)
        if product_id is None:
            return None
        return db.query(Product).filter(
            Product.id == product_id,
            Product.is_active == True,  # noqa: E712
        ).first()


# Singleton
catalog_service = CatalogService()
