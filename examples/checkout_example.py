"""
Checkout Example — cancel, retry, pay, and the paid-but-unrecorded case.

Run: python -m examples.checkout_example
"""

from decimal import Decimal

from kungfu import Ok, Error

from medcart import checkout as C
from medcart.address import AddressBook
from medcart.cart import CartStore
from medcart.formatting import expected_delivery, format_delivery, format_price
from medcart.gateway import CANCEL_MESSAGE, SessionTokenGateway
from medcart.log import setup_logging
from medcart.orders import PaymentMethod
from examples._infra import FakeOrderApi, ScriptedWidget, banner, fake_proxy, run


def fresh_cart() -> CartStore:
    cart = CartStore()
    cart.add_line("101", Decimal("150"), max_quantity=5)
    cart.add_line("101", Decimal("150"), max_quantity=5)
    cart.add_line("205", Decimal("150"), max_quantity=5)
    return cart


def address_book() -> AddressBook:
    book = AddressBook()
    book.create({
        "fullName": "Asha Rao",
        "phone": "9876543210",
        "addressLine": "12 MG Road, Indiranagar",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560038",
        "type": "Home",
    })
    return book


def show(result: object) -> None:
    match result:
        case Ok(order):
            print(f"   placed #{order.order_id}: {format_price(order.grand_total)} ({order.payment_status.value})")
            print(f"   arriving by {format_delivery(expected_delivery(order.created_at.date()))}")
        case Error(err):
            print(f"   {err.kind.name}: {err.message} (retryable={err.retryable})")


# ═══════════════════════════════════════════════════════════════════════════════
# Demo
# ═══════════════════════════════════════════════════════════════════════════════


async def main() -> None:
    setup_logging("WARNING")
    banner("Checkout")

    api = FakeOrderApi()
    widget = ScriptedWidget([
        {"error": {"message": CANCEL_MESSAGE}},
        {"paymentDetails": {"paymentMessage": "Payment successful"}},
        {"paymentDetails": {"paymentMessage": "Payment successful"}},
    ])
    gateway = SessionTokenGateway(fake_proxy(), widget)

    # 1. Cancel, then pay
    print("\n1. Cancel in widget, then pay:")
    cart = fresh_cart()
    flow = C.CheckoutOrchestrator(cart, address_book(), gateway, api.client())
    flow.begin()
    flow.proceed_to_payment()
    print(f"   total {format_price(flow.session.grand_total)} to {flow.session.address.one_line}")
    show(await flow.confirm(PaymentMethod.UPI))
    print(f"   phase={flow.phase.name}, notice={flow.last_notice.level.name}")
    show(await flow.confirm(PaymentMethod.UPI))
    print(f"   cart empty: {cart.is_empty}")

    # 2. Paid, order API down
    print("\n2. Paid, but order API is down:")
    api.down = True
    cart = fresh_cart()
    flow = C.CheckoutOrchestrator(cart, address_book(), gateway, api.client())
    flow.begin()
    flow.proceed_to_payment()
    show(await flow.confirm(PaymentMethod.CARD))
    print(f"   phase={flow.phase.name}, cart kept: {not cart.is_empty}")
    show(flow.begin())

    print(f"\nSummary: {api.calls} order API calls")


if __name__ == "__main__":
    run(main)
