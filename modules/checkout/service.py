"""
Checkout Module - Service Layer
=================================
Validate the cart, debit the wallet by the cart total, and empty the cart.

All checks are reads; the debit and the clear are applied to the same
session and persisted by a single commit, so either both happen or neither.
"""

import logging

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from common.exceptions import NotFoundError, InvalidStateError, InsufficientFundsError
from config.settings import CHECKOUT_MULTIPLY_QUANTITY
from modules.cart.models import Cart, CartItem
from modules.cart.service import cart_service
from modules.user.models import User

logger = logging.getLogger("qkart.checkout")


class CheckoutService:

    def __init__(self, multiply_quantity: bool = True):
        self.multiply_quantity = multiply_quantity

    def cart_total(self, cart: Cart) -> int:
        """Sum of snapshot costs (times quantity unless legacy mode is configured)."""
        if self.multiply_quantity:
            return sum(item.line_total for item in cart.items)
        return sum(item.product_cost for item in cart.items)

    def checkout(self, db: Session, user: User) -> dict:
        """
        Checkout the user's cart. On success the cart has no products and
        the wallet is debited by the total.

        Steps:
        1. Load and lock the cart           -> NotFoundError
        2. Cart must have items             -> InvalidStateError
        3. Lock user row, re-read it; non-default address must be set
                                            -> InvalidStateError
        4. Compute total
        5. Compare balance                  -> InsufficientFundsError
        6. Clear exactly the items read, debit the wallet, flush

        Step 6 is written as conditional SQL: only the item rows read in
        step 1 (with the quantities read) are deleted, and the debit only
        applies while wallet_money >= total. If another session got there
        first, the session is rolled back and the matching error is raised.
        Nothing depends on FOR UPDATE being honoured by the backend.

        Returns a summary: {"total", "balance", "items"}.
        """
        cart = cart_service.find_cart(db, user.id, lock=True)
        if not cart:
            raise NotFoundError("User does not have a cart")

        items = list(cart.items)
        if not items:
            raise InvalidStateError("No products in cart")

        # Eligibility is read from the locked row
        db.refresh(user, with_for_update=True)
        if not user.has_non_default_address():
            raise InvalidStateError("Address not set")

        total = self.cart_total(cart)
        item_count = len(items)

        if user.wallet_money < total:
            logger.warning(
                "Checkout rejected for user %s: balance %s < total %s",
                user.id, user.wallet_money, total,
            )
            raise InsufficientFundsError(balance=user.wallet_money, total=total)

        cleared = db.query(CartItem).filter(
            CartItem.cart_id == cart.id,
            or_(*[
                and_(CartItem.id == item.id, CartItem.quantity == item.quantity)
                for item in items
            ]),
        ).delete(synchronize_session=False)
        if cleared != item_count:
            logger.warning(
                "Checkout of cart %s lost a race: cleared %s of %s items",
                cart.id, cleared, item_count,
            )
            db.rollback()
            if cleared == 0:
                raise InvalidStateError("No products in cart")
            raise InvalidStateError("Cart changed during checkout")

        debited = db.query(User).filter(
            User.id == user.id,
            User.wallet_money >= total,
        ).update({User.wallet_money: User.wallet_money - total}, synchronize_session=False)
        if debited != 1:
            logger.warning("Checkout of cart %s rejected: balance changed below %s", cart.id, total)
            db.rollback()
            raise InsufficientFundsError()

        db.expire(cart, ["items"])
        db.expire(user, ["wallet_money"])
        db.flush()

        logger.info(
            "Checkout of cart %s for user %s: %s items, total %s, balance now %s",
            cart.id, user.id, item_count, total, user.wallet_money,
        )
        return {"total": total, "balance": user.wallet_money, "items": item_count}


# Singleton
checkout_service = CheckoutService(multiply_quantity=CHECKOUT_MULTIPLY_QUANTITY)
