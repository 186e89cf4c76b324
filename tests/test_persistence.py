"""Tests for the SQLAlchemy state repository."""

import asyncio
from decimal import Decimal

from kungfu import Ok

from medcart.address import AddressBook
from medcart.cart import CartStore
from medcart.persistence import StateRepository, create_database


def with_repo(fn):
    async def run():
        session_factory, engine = await create_database("sqlite+aiosqlite:///:memory:")
        try:
            return await fn(StateRepository(session_factory))
        finally:
            await engine.dispose()
    return asyncio.run(run())


class TestCart:
    def test_round_trip_keeps_order(self, cart):
        async def scenario(repo):
            assert isinstance(await repo.save_cart(cart), Ok)
            return await repo.load_cart()

        loaded = with_repo(scenario).value

        assert [l.product_id for l in loaded.lines] == ["101", "205"]
        assert loaded.totals() == cart.totals()

    def test_save_replaces_previous(self, cart):
        async def scenario(repo):
            await repo.save_cart(cart)
            await repo.save_cart(CartStore())
            return await repo.load_cart()

        assert with_repo(scenario).value.is_empty

    def test_empty_database(self):
        async def scenario(repo):
            return await repo.load_cart(), await repo.load_address_book()

        cart, book = with_repo(scenario)

        assert cart.value.is_empty
        assert len(book.value) == 0
        assert book.value.selected_id is None


class TestAddressBook:
    def test_round_trip(self, book, make_form):
        second = book.create(make_form(fullName="Meera Iyer", type="Work")).value
        book.select(second.id)

        async def scenario(repo):
            await repo.save_address_book(book)
            return await repo.load_address_book()

        loaded = with_repo(scenario).value

        assert loaded.addresses == book.addresses
        assert loaded.selected_id == second.id
        assert loaded.default.id == book.default.id

    def test_prices_survive_as_decimal(self):
        cart = CartStore()
        cart.add_line("101", Decimal("35.50"), max_quantity=3)

        async def scenario(repo):
            await repo.save_cart(cart)
            return await repo.load_cart()

        assert with_repo(scenario).value.get("101").unit_price == Decimal("35.50")

    def test_selection_survives_empty_book(self):
        async def scenario(repo):
            await repo.save_address_book(AddressBook())
            return await repo.load_address_book()

        assert with_repo(scenario).value.selected_id is None
