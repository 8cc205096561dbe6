"""
Catalog Module - Models
========================
Product reference data. Read-only from the cart/checkout side.
"""

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, CheckConstraint,
)
from sqlalchemy.sql import func
from config.database import Base


# ==========================================
# 📦 Product
# ==========================================

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True, index=True)
    cost = Column(Integer, nullable=False)
    rating = Column(Integer, default=0, nullable=False)
    image = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_product_cost_non_negative"),
    )

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "name": self.name,
            "category": self.category,
            "cost": self.cost,
            "rating": self.rating,
            "image": self.image,
        }

    def __repr__(self):
        return f"<Product {self.name}>"
