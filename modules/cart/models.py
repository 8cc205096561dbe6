"""
Cart Module - Models
=====================
Shopping cart with per-user uniqueness and quantity constraints.
Cart items keep a snapshot of the product as it was when added.
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class Cart(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    payment_option = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    items = relationship(
        "CartItem", back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )

    def find_item(self, product_id: int):
        """Return the item referencing product_id, or None."""
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "email": self.user.email if self.user else None,
            "paymentOption": self.payment_option,
            "cartItems": [item.to_dict() for item in self.items],
        }


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)

    # Snapshot at add-time
    product_name = Column(String, nullable=False)
    product_category = Column(String, nullable=True)
    product_cost = Column(Integer, nullable=False)
    product_rating = Column(Integer, default=0, nullable=False)
    product_image = Column(String, nullable=True)

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_qty"),
    )

    @classmethod
    def from_product(cls, product, quantity: int) -> "CartItem":
        return cls(
            product_id=product.id,
            quantity=quantity,
            product_name=product.name,
            product_category=product.category,
            product_cost=product.cost,
            product_rating=product.rating,
            product_image=product.image,
        )

    @property
    def line_total(self) -> int:
        return self.product_cost * self.quantity

    def to_dict(self) -> dict:
        return {
            "product": {
                "_id": self.product_id,
                "name": self.product_name,
                "category": self.product_category,
                "cost": self.product_cost,
                "rating": self.product_rating,
                "image": self.product_image,
            },
            "quantity": self.quantity,
        }
