from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from cart_api.data.models.cart import ACTIVE, CLOSED
from cart_api.repos.cart_repo import CartRepo, ItemChange


def _quantities(repo, cart_id):
    return {line.product_id: line.quantity for line in repo.get_items(cart_id)}


@pytest.fixture()
def cart(repo):
    created = repo.create_cart("+5491100000")
    repo.commit()
    return created


class TestCarts:
    def test_create_cart_is_active(self, repo):
        created = repo.create_cart(None)
        repo.commit()

        assert created.id
        assert created.status == ACTIVE
        assert created.identity is None

    def test_find_active_cart_by_identity(self, repo, cart):
        found = repo.find_active_cart_by_identity("+5491100000")
        assert found.id == cart.id

    def test_find_active_ignores_closed_and_returns_newest(self, repo, cart):
        repo.close_cart(cart.id)
        newer = repo.create_cart("+5491100000")
        repo.commit()

        assert repo.find_active_cart_by_identity("+5491100000").id == newer.id

    def test_find_active_unknown_identity(self, repo):
        assert repo.find_active_cart_by_identity("+000") is None

    def test_second_active_cart_for_identity_is_rejected(self, repo, cart):
        with pytest.raises(IntegrityError):
            repo.create_cart("+5491100000")
        repo.rollback()

    def test_anonymous_carts_do_not_collide(self, repo):
        a = repo.create_cart(None)
        b = repo.create_cart(None)
        repo.commit()

        assert a.id != b.id

    def test_close_cart_is_idempotent(self, repo, cart):
        repo.close_cart(cart.id)
        repo.close_cart(cart.id)
        repo.commit()

        assert repo.get_cart(cart.id).status == CLOSED


class TestItems:
    def test_upsert_increment_inserts_then_accumulates(self, repo, cart):
        assert repo.upsert_increment(cart.id, 7, 2) == 2
        assert repo.upsert_increment(cart.id, 7, 3) == 5
        repo.commit()

        assert _quantities(repo, cart.id) == {7: 5}

    def test_increment_beyond_max_quantity_leaves_row(self, session, cart):
        capped = CartRepo(session, max_quantity=10)
        capped.upsert_increment(cart.id, 7, 8)

        assert capped.upsert_increment(cart.id, 7, 3) is None
        assert capped.upsert_increment(cart.id, 7, 2) == 10
        assert _quantities(capped, cart.id) == {7: 10}

    def test_negative_delta_decrements(self, repo, cart):
        repo.upsert_increment(cart.id, 7, 5)

        assert repo.upsert_increment(cart.id, 7, -2) == 3
        assert _quantities(repo, cart.id) == {7: 3}

    def test_negative_delta_below_zero_drops_row(self, repo, cart):
        repo.upsert_increment(cart.id, 7, 2)

        assert repo.upsert_increment(cart.id, 7, -5) == 0
        assert _quantities(repo, cart.id) == {}

    def test_non_positive_delta_on_absent_row_is_noop(self, repo, cart):
        assert repo.upsert_increment(cart.id, 7, 0) == 0
        assert repo.upsert_increment(cart.id, 7, -1) == 0
        assert repo.get_items(cart.id) == []

    def test_set_exact_quantity_states(self, repo, cart):
        assert repo.set_exact_quantity(cart.id, 3, 4) == ItemChange.CREATED
        assert repo.set_exact_quantity(cart.id, 3, 1) == ItemChange.UPDATED
        assert _quantities(repo, cart.id) == {3: 1}

        assert repo.set_exact_quantity(cart.id, 3, 0) == ItemChange.DELETED
        assert _quantities(repo, cart.id) == {}

    def test_set_zero_on_absent_row_reports_deleted(self, repo, cart):
        assert repo.set_exact_quantity(cart.id, 3, -1) == ItemChange.DELETED
        assert repo.get_items(cart.id) == []

    def test_remove_item(self, repo, cart):
        repo.upsert_increment(cart.id, 1, 1)

        assert repo.remove_item(cart.id, 1) is True
        assert repo.remove_item(cart.id, 1) is False

    def test_get_items_joins_product_and_orders_by_id(self, repo, cart):
        repo.upsert_increment(cart.id, 8, 1)
        repo.upsert_increment(cart.id, 7, 2)
        repo.commit()

        lines = repo.get_items(cart.id)

        assert [line.product_id for line in lines] == [7, 8]
        scarf = lines[0]
        assert scarf.name == "Red Scarf"
        assert scarf.price == Decimal("19.99")
        assert scarf.subtotal == Decimal("39.98")

    def test_get_items_unknown_cart(self, repo):
        assert repo.get_items("no-such-cart") == []

    def test_items_of_other_carts_are_isolated(self, repo, cart):
        other = repo.create_cart(None)
        repo.upsert_increment(cart.id, 1, 1)
        repo.upsert_increment(other.id, 1, 4)
        repo.commit()

        assert _quantities(repo, cart.id) == {1: 1}
        assert _quantities(repo, other.id) == {1: 4}
