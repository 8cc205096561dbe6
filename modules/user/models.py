"""
User Module - User Model
=========================
Shopper account: credentials, wallet balance, and shipping address.
Only the fields the cart/checkout core reads live here.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, CheckConstraint,
)
from sqlalchemy.sql import func
from config.database import Base
from config.settings import DEFAULT_ADDRESS, DEFAULT_WALLET_MONEY


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # === Identity ===
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    # === Wallet & Shipping ===
    wallet_money = Column(Integer, default=DEFAULT_WALLET_MONEY, nullable=False)
    address = Column(Text, default=DEFAULT_ADDRESS, nullable=False)

    # === Audit ===
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("wallet_money >= 0", name="ck_user_wallet_non_negative"),
    )

    def has_non_default_address(self) -> bool:
        """True once the user has configured a real shipping address."""
        address = (self.address or "").strip()
        return bool(address) and address != DEFAULT_ADDRESS

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "walletMoney": self.wallet_money,
            "address": self.address,
        }

    def __repr__(self):
        return f"<User {self.email}>"
