"""
Cart Module - Service Layer
==============================
Cart management: get, lazy create, add/update/remove items.

Every mutating call locks the user's cart row (SELECT ... FOR UPDATE) and
touches single cart_items rows, so concurrent adds of different products
cannot overwrite each other. Services flush; the caller commits.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from common.exceptions import (
    NotFoundError, ConflictError, InvalidReferenceError,
    InvalidStateError, InternalError,
)
from common.helpers import safe_int
from config.settings import DEFAULT_PAYMENT_OPTION
from modules.cart.models import Cart, CartItem
from modules.catalog.service import catalog_service
from modules.user.models import User

logger = logging.getLogger("qkart.cart")


class CartService:

    def __init__(self, default_payment_option: str):
        self.default_payment_option = default_payment_option

    # ==========================================
    # Lookup
    # ==========================================

    def find_cart(self, db: Session, user_id: int, lock: bool = False) -> Optional[Cart]:
        """Return the user's cart or None. lock=True takes a row lock until commit."""
        query = db.query(Cart).filter(Cart.user_id == user_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    def get_cart(self, db: Session, user: User) -> Cart:
        """Fetch the user's cart. Raises NotFoundError if it was never created."""
        cart = self.find_cart(db, user.id)
        if not cart:
            raise NotFoundError("User does not have a cart")
        return cart

    # ==========================================
    # Mutations
    # ==========================================

    def add_product(self, db: Session, user: User, product_id, quantity: int) -> Cart:
        """
        Add a new product to the user's cart, creating the cart on first use.

        Raises:
            ConflictError: product already in cart
            InvalidReferenceError: product not in catalog
            InternalError: cart could not be created
        """
        if quantity is None or quantity <= 0:
            raise ValueError("Quantity must be positive")

        pid = safe_int(product_id)
        cart = self._get_or_create_cart(db, user)

        if pid is not None and cart.find_item(pid):
            logger.warning("Rejected duplicate product %s for user %s", pid, user.id)
            raise ConflictError(
                "Product already in cart. Use the cart sidebar to update or remove product from cart"
            )

        product = catalog_service.find_by_id(db, pid)
        if not product:
            raise InvalidReferenceError("Product doesn't exist in database")

        cart.items.append(CartItem.from_product(product, quantity))
        try:
            db.flush()
        except IntegrityError:
            # Unique (cart_id, product_id): a concurrent request added it first
            db.rollback()
            logger.warning("Concurrent duplicate add of product %s for user %s", pid, user.id)
            raise ConflictError(
                "Product already in cart. Use the cart sidebar to update or remove product from cart"
            )

        logger.info("Added product %s x%s to cart %s", pid, quantity, cart.id)
        return cart

    def update_product(self, db: Session, user: User, product_id, quantity: int) -> Cart:
        """
        Set the quantity of a product already in the cart. Quantity 0 removes it.

        Raises:
            NotFoundError: user has no cart
            InvalidReferenceError: product not in catalog
            InvalidStateError: product not in cart
        """
        if quantity is None or quantity < 0:
            raise ValueError("Quantity must not be negative")

        cart = self.find_cart(db, user.id, lock=True)
        if not cart:
            raise NotFoundError("User does not have a cart. Use POST to create cart and add a product")

        product = catalog_service.find_by_id(db, product_id)
        if not product:
            raise InvalidReferenceError("Product doesn't exist in database")

        item = cart.find_item(product.id)
        if not item:
            raise InvalidStateError("Product not in cart")

        if quantity == 0:
            cart.items.remove(item)
            logger.info("Removed product %s from cart %s (quantity 0)", product.id, cart.id)
        else:
            item.quantity = quantity
            logger.info("Set product %s quantity to %s in cart %s", product.id, quantity, cart.id)

        db.flush()
        return cart

    def delete_product(self, db: Session, user: User, product_id) -> None:
        """
        Remove a product from the cart.

        Raises:
            NotFoundError: user has no cart
            InvalidStateError: product not in cart
        """
        cart = self.find_cart(db, user.id, lock=True)
        if not cart:
            raise NotFoundError("User does not have a cart")

        pid = safe_int(product_id)
        item = cart.find_item(pid) if pid is not None else None
        if not item:
            raise InvalidStateError("Product not in user's cart")

        cart.items.remove(item)
        db.flush()
        logger.info("Deleted product %s from cart %s", pid, cart.id)

    # ==========================================
    # Private helpers
    # ==========================================

    def _get_or_create_cart(self, db: Session, user: User) -> Cart:
        cart = self.find_cart(db, user.id, lock=True)
        if cart:
            return cart

        cart = Cart(user_id=user.id, payment_option=self.default_payment_option)
        db.add(cart)
        try:
            db.flush()
        except SQLAlchemyError as e:
            db.rollback()
            # Unique user_id: another request may have created it meanwhile
            cart = self.find_cart(db, user.id, lock=True)
            if cart:
                return cart
            logger.error("Cart creation failed for user %s: %s", user.id, e)
            raise InternalError("Something went wrong.. Internal server error")

        logger.info("Created cart %s for user %s", cart.id, user.id)
        return cart


# Singleton
cart_service = CartService(default_payment_option=DEFAULT_PAYMENT_OPTION)
