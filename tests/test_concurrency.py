"""
Concurrent cart mutations and checkouts from separate sessions
"""

import threading

from common.exceptions import InvalidStateError
from config.database import SessionLocal
from modules.cart.models import Cart
from modules.cart.service import cart_service
from modules.checkout.service import checkout_service
from modules.user.models import User

ROUNDS = 5


def _run_in_parallel(user_id, *calls):
    """Run each call(session, user) in its own thread and session; return raised errors."""
    barrier = threading.Barrier(len(calls))
    errors = []

    def worker(call):
        session = SessionLocal()
        try:
            me = session.get(User, user_id)
            barrier.wait()
            call(session, me)
            session.commit()
        except Exception as e:  # collected for assertions
            session.rollback()
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(c,)) for c in calls]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return errors


def _state(user_id):
    """(wallet_money, sorted product ids in cart)"""
    with SessionLocal() as check:
        wallet = check.get(User, user_id).wallet_money
        cart = check.query(Cart).filter(Cart.user_id == user_id).first()
        return wallet, sorted(item.product_id for item in cart.items) if cart else []


def _shopper_with_cart(db, make_user, email, wallet_money, *product_ids):
    shopper = make_user(email=email, wallet_money=wallet_money)
    for pid in product_ids:
        cart_service.add_product(db, shopper, pid, 1)
    db.commit()
    user_id = shopper.id
    db.close()
    return user_id


class TestConcurrentAdds:

    def test_two_adds_of_distinct_products_both_land(self, db, user, products):
        # Empty cart: created by an add, emptied by a delete
        cart_service.add_product(db, user, products[2].id, 1)
        db.commit()
        cart_service.delete_product(db, user, products[2].id)
        db.commit()

        user_id = user.id
        first, second = products[0].id, products[1].id
        db.close()

        errors = _run_in_parallel(
            user_id,
            lambda s, me: cart_service.add_product(s, me, first, 1),
            lambda s, me: cart_service.add_product(s, me, second, 1),
        )

        assert errors == []
        assert _state(user_id)[1] == sorted([first, second])

    def test_first_adds_race_to_create_the_cart(self, db, make_user, products):
        first, second = products[0].id, products[1].id

        for n in range(ROUNDS):
            user_id = _shopper_with_cart(db, make_user, f"fresh{n}@example.com", 500)

            errors = _run_in_parallel(
                user_id,
                lambda s, me: cart_service.add_product(s, me, first, 1),
                lambda s, me: cart_service.add_product(s, me, second, 1),
            )

            assert errors == []
            with SessionLocal() as check:
                assert check.query(Cart).filter(Cart.user_id == user_id).count() == 1
            assert _state(user_id)[1] == sorted([first, second])


class TestConcurrentCheckout:

    def test_only_one_of_two_checkouts_succeeds(self, db, make_user, products):
        ids = (products[0].id, products[1].id)

        for n in range(ROUNDS):
            user_id = _shopper_with_cart(db, make_user, f"twice{n}@example.com", 500, *ids)

            errors = _run_in_parallel(
                user_id,
                lambda s, me: checkout_service.checkout(s, me),
                lambda s, me: checkout_service.checkout(s, me),
            )

            assert len(errors) == 1
            assert isinstance(errors[0], InvalidStateError)
            assert _state(user_id) == (150, [])

    def test_add_racing_checkout_charges_what_it_clears(self, db, make_user, products):
        costs = {p.id: p.cost for p in products}
        ids = (products[0].id, products[1].id)
        extra = products[2].id

        for n in range(ROUNDS):
            user_id = _shopper_with_cart(db, make_user, f"racer{n}@example.com", 2000, *ids)

            errors = _run_in_parallel(
                user_id,
                lambda s, me: checkout_service.checkout(s, me),
                lambda s, me: cart_service.add_product(s, me, extra, 1),
            )

            assert errors == []
            wallet, remaining = _state(user_id)
            cleared = set(costs) - set(remaining)
            assert 2000 - wallet == sum(costs[pid] for pid in cleared)
            assert remaining in ([], [extra])


class TestStaleCheckout:
    """A session whose view of the cart predates another session's commit"""

    def _stale_session(self, user_id):
        session = SessionLocal()
        me = session.get(User, user_id)
        cart = cart_service.find_cart(session, user_id)
        assert len(cart.items) > 0  # loads the collection now
        return session, me

    def test_cart_already_checked_out_elsewhere(self, db, make_user, products):
        user_id = _shopper_with_cart(db, make_user, "stale@example.com", 1000, products[0].id, products[1].id)
        stale, me = self._stale_session(user_id)

        errors = _run_in_parallel(user_id, lambda s, other: checkout_service.checkout(s, other))
        assert errors == []

        try:
            checkout_service.checkout(stale, me)
            raised = None
        except InvalidStateError as e:
            raised = e
        finally:
            stale.close()

        assert raised is not None
        assert _state(user_id) == (650, [])

    def test_item_added_elsewhere_is_not_cleared(self, db, make_user, products):
        extra = products[2].id
        user_id = _shopper_with_cart(db, make_user, "late@example.com", 1000, products[0].id, products[1].id)
        stale, me = self._stale_session(user_id)

        errors = _run_in_parallel(user_id, lambda s, other: cart_service.add_product(s, other, extra, 1))
        assert errors == []

        summary = checkout_service.checkout(stale, me)
        stale.commit()
        stale.close()

        assert summary["total"] == 350
        assert _state(user_id) == (650, [extra])

    def test_quantity_changed_elsewhere_aborts(self, db, make_user, products):
        first, second = products[0].id, products[1].id
        user_id = _shopper_with_cart(db, make_user, "bump@example.com", 1000, first, second)
        stale, me = self._stale_session(user_id)

        errors = _run_in_parallel(user_id, lambda s, other: cart_service.update_product(s, other, first, 3))
        assert errors == []

        try:
            checkout_service.checkout(stale, me)
            raised = None
        except InvalidStateError as e:
            raised = e
        finally:
            stale.close()

        assert raised is not None
        assert _state(user_id) == (1000, sorted([first, second]))
