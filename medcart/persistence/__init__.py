"""
Persistence — cart and address book across restarts (SQLAlchemy async).

    from medcart import persistence as P

    session_factory, engine = await P.create_database(settings.database_url)
    repo = P.StateRepository(session_factory)

    match await repo.load_cart():
        case Ok(cart): ...
    await repo.save_cart(cart)
"""

from medcart.persistence._tables import (
    Base,
    CartLineRow,
    AddressRow,
    SelectionRow,
    create_database,
)
from medcart.persistence._repo import PersistenceError, StateRepository

__all__ = (
    "Base",
    "CartLineRow",
    "AddressRow",
    "SelectionRow",
    "create_database",
    "PersistenceError",
    "StateRepository",
)
