"""Tests for the checkout orchestrator."""

import asyncio
from decimal import Decimal

import httpx
import pytest
from kungfu import Ok, Error

from medcart.address import Address, AddressBook
from medcart.cart import CartStore
from medcart.checkout import (
    CANCELLED_NOTICE,
    CheckoutErrorKind,
    CheckoutOrchestrator,
    NoticeLevel,
    Phase,
)
from medcart.gateway import Cancelled, Failed, GatewaySessionError, GatewaySessionErrorKind
from medcart.orders import OrderClient, PaymentMethod, PaymentStatus


def make_checkout(cart, book, gateway, api):
    return CheckoutOrchestrator(cart, book, gateway, api.client(), session_id_factory=lambda: "sess-1")


def at_payment(checkout):
    assert isinstance(checkout.begin(), Ok)
    assert isinstance(checkout.proceed_to_payment(), Ok)
    assert checkout.phase is Phase.PAYMENT
    return checkout


class TestForwardTransitions:
    def test_begin_requires_lines(self, book, gateway, order_api):
        checkout = make_checkout(CartStore(), book, gateway, order_api)

        result = checkout.begin()

        assert isinstance(result, Error)
        assert result.value.kind is CheckoutErrorKind.NO_CART_LINES
        assert checkout.phase is Phase.CART

    def test_begin_moves_to_address(self, cart, book, gateway, order_api):
        checkout = make_checkout(cart, book, gateway, order_api)

        result = checkout.begin()

        assert isinstance(result, Ok)
        assert result.value.id == "sess-1"
        assert checkout.phase is Phase.ADDRESS

    def test_payment_requires_selected_address(self, cart, gateway, order_api):
        checkout = make_checkout(cart, AddressBook(), gateway, order_api)
        checkout.begin()

        result = checkout.proceed_to_payment()

        assert isinstance(result, Error)
        assert result.value.kind is CheckoutErrorKind.NO_ADDRESS_SELECTED
        assert checkout.phase is Phase.ADDRESS

    def test_payment_rejects_invalid_stored_address(self, cart, gateway, order_api):
        broken = Address("a1", "Asha Rao", "5123456789", "12 MG Road, Indiranagar", "Bengaluru", "Karnataka", "560038")
        checkout = make_checkout(cart, AddressBook([broken], "a1"), gateway, order_api)
        checkout.begin()

        result = checkout.proceed_to_payment()

        assert result.value.kind is CheckoutErrorKind.NO_ADDRESS_SELECTED
        assert checkout.phase is Phase.ADDRESS

    def test_below_threshold_pays_delivery(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        session = checkout.session
        assert session.subtotal == Decimal("450")
        assert session.delivery_fee == Decimal("40")
        assert session.grand_total == Decimal("490")
        assert session.address_id == book.selected_id

    def test_free_delivery_at_500(self, book, gateway, order_api):
        cart = CartStore()
        cart.add_line("101", Decimal("250"), max_quantity=5)
        cart.add_line("101", Decimal("250"), max_quantity=5)
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        assert checkout.session.delivery_fee == Decimal("0")
        assert checkout.session.grand_total == Decimal("500")

    def test_confirm_outside_payment(self, cart, book, gateway, order_api):
        checkout = make_checkout(cart, book, gateway, order_api)

        result = asyncio.run(checkout.confirm(PaymentMethod.COD))

        assert result.value.kind is CheckoutErrorKind.INVALID_TRANSITION
        assert order_api.create_calls == []

    def test_begin_again_keeps_current_session(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))
        session = checkout.session

        again = checkout.begin()

        assert again.value is session
        assert checkout.phase is Phase.PAYMENT
        assert again.value.address is not None


class TestBackCancelReset:
    def test_back_walks_to_cart(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        assert checkout.back().value is Phase.ADDRESS
        assert checkout.back().value is Phase.CART
        assert checkout.session is None
        assert isinstance(checkout.back(), Error)

    def test_cancel_from_payment(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        assert checkout.cancel().value is Phase.CANCELLED
        assert checkout.session is None
        assert not cart.is_empty
        assert isinstance(checkout.begin(), Ok)

    def test_reset(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        assert checkout.reset().value is Phase.CART
        assert checkout.last_notice is None


class TestCashOnDelivery:
    def test_success(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        result = asyncio.run(checkout.confirm(PaymentMethod.COD))

        assert isinstance(result, Ok)
        order = result.value
        assert order.order_id == 42
        assert order.payment_status is PaymentStatus.PENDING
        assert order.total_amount == Decimal("450")
        assert order.delivery_charge == Decimal("40")
        assert order.grand_total == Decimal("490")
        assert checkout.last_order == order
        assert checkout.phase is Phase.SUCCESS
        assert checkout.session is None
        assert cart.is_empty
        assert gateway.sessions == []
        assert order_api.payload()["payment_method"] == "COD"
        assert order_api.payload()["delivery_charge"] == 40.0

    def test_failure_is_retryable_and_keeps_cart(self, cart, book, gateway, failing_order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, failing_order_api))

        result = asyncio.run(checkout.confirm(PaymentMethod.COD))

        assert isinstance(result, Error)
        assert result.value.kind is CheckoutErrorKind.ORDER_SUBMISSION_FAILED
        assert result.value.retryable
        assert checkout.phase is Phase.PAYMENT
        assert not cart.is_empty
        assert checkout.last_notice.level is NoticeLevel.ERROR

    def test_retry_after_failure(self, cart, book, gateway, failing_order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, failing_order_api))

        async def run():
            first = await checkout.confirm(PaymentMethod.COD)
            failing_order_api.status = 201
            failing_order_api.body = {"message": "Order created", "order_id": 43, "user_id": 7}
            return first, await checkout.confirm(PaymentMethod.COD)

        first, second = asyncio.run(run())

        assert isinstance(first, Error)
        assert isinstance(second, Ok)
        assert second.value.order_id == 43
        assert len(failing_order_api.create_calls) == 2


class TestOnlineGateway:
    def test_success(self, cart, book, gateway, order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        result = asyncio.run(checkout.confirm(PaymentMethod.UPI))

        assert isinstance(result, Ok)
        assert result.value.payment_status is PaymentStatus.SUCCESS
        assert result.value.payment_reference == "pay_123"
        assert cart.is_empty
        assert checkout.phase is Phase.SUCCESS
        amount, customer = gateway.sessions[0]
        assert amount == Decimal("490")
        assert customer.name == "Asha Rao"
        assert order_api.payload()["payment_method"] == "UPI"

    def test_paid_but_unrecorded_keeps_cart_and_escalates(self, cart, book, gateway, failing_order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, failing_order_api))
        lines_before = cart.snapshot()

        result = asyncio.run(checkout.confirm(PaymentMethod.CARD))

        assert isinstance(result, Error)
        error = result.value
        assert error.kind is CheckoutErrorKind.PAYMENT_UNRECORDED
        assert not error.retryable
        assert error.reference == "pay_123"
        assert "not recorded" in error.message
        assert "pay_123" in error.message
        assert checkout.phase is Phase.FAILED
        assert cart.snapshot() == lines_before
        assert checkout.last_order is None
        assert checkout.last_notice.level is NoticeLevel.ERROR

    def test_unrecorded_blocks_new_checkout_until_reset(self, cart, book, gateway, failing_order_api):
        checkout = at_payment(make_checkout(cart, book, gateway, failing_order_api))

        async def run():
            await checkout.confirm(PaymentMethod.UPI)
            return checkout.begin(), await checkout.confirm(PaymentMethod.UPI)

        begin, again = asyncio.run(run())

        assert begin.value.kind is CheckoutErrorKind.PAYMENT_UNRECORDED
        assert isinstance(again, Error)
        assert len(failing_order_api.create_calls) == 1
        assert gateway.presented == 1

        assert isinstance(checkout.reset(), Ok)
        assert isinstance(checkout.begin(), Ok)

    def test_cancelled_returns_to_payment(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(outcome=Cancelled())
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))
        selected = book.selected_id
        lines = cart.snapshot()

        result = asyncio.run(checkout.confirm(PaymentMethod.UPI))

        assert isinstance(result, Error)
        assert result.value.kind is CheckoutErrorKind.GATEWAY_CANCELLED
        assert result.value.message == CANCELLED_NOTICE
        assert checkout.last_notice.level is NoticeLevel.INFO
        assert checkout.phase is Phase.PAYMENT
        assert checkout.session.payment_method is None
        assert cart.snapshot() == lines
        assert book.selected_id == selected
        assert order_api.create_calls == []

    def test_failed_returns_to_payment_with_reason(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(outcome=Failed("Card declined by bank"))
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        result = asyncio.run(checkout.confirm(PaymentMethod.CARD))

        assert result.value.kind is CheckoutErrorKind.GATEWAY_FAILED
        assert result.value.message == "Card declined by bank"
        assert result.value.retryable
        assert checkout.last_notice.level is NoticeLevel.ERROR
        assert checkout.phase is Phase.PAYMENT
        assert order_api.create_calls == []

    def test_session_error_stays_in_payment(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(session_error=GatewaySessionError(GatewaySessionErrorKind.MALFORMED, "no session id"))
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        result = asyncio.run(checkout.confirm(PaymentMethod.UPI))

        assert result.value.kind is CheckoutErrorKind.GATEWAY_SESSION_FAILED
        assert result.value.retryable
        assert gateway.presented == 0
        assert checkout.phase is Phase.PAYMENT

    def test_retry_after_cancel(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(outcome=Cancelled())
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        async def run():
            await checkout.confirm(PaymentMethod.UPI)
            gateway.outcome = make_gateway().outcome
            return await checkout.confirm(PaymentMethod.UPI)

        result = asyncio.run(run())

        assert isinstance(result, Ok)
        assert len(order_api.create_calls) == 1


class TestSingleSubmission:
    def test_repeated_confirm_while_submitting(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(hold=True)
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        async def run():
            first = asyncio.create_task(checkout.confirm(PaymentMethod.UPI))
            await gateway.opened.wait()
            assert checkout.phase is Phase.SUBMITTING
            repeats = [await checkout.confirm(PaymentMethod.UPI) for _ in range(3)]
            cancel = checkout.cancel()
            begin = checkout.begin()
            gateway.release.set()
            return await first, repeats, cancel, begin

        first, repeats, cancel, begin = asyncio.run(run())

        assert isinstance(first, Ok)
        assert all(r.value.kind is CheckoutErrorKind.CHECKOUT_IN_PROGRESS for r in repeats)
        assert cancel.value.kind is CheckoutErrorKind.CHECKOUT_IN_PROGRESS
        assert begin.value.kind is CheckoutErrorKind.CHECKOUT_IN_PROGRESS
        assert len(gateway.sessions) == 1
        assert len(order_api.create_calls) == 1

    def test_snapshot_frozen_during_payment(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(hold=True)
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        async def run():
            task = asyncio.create_task(checkout.confirm(PaymentMethod.UPI))
            await gateway.opened.wait()
            cart.add_line("999", Decimal("1000"), max_quantity=1)
            gateway.release.set()
            return await task

        result = asyncio.run(run())

        assert result.value.grand_total == Decimal("490")
        assert gateway.sessions[0][0] == Decimal("490")
        assert [item["product_id"] for item in order_api.payload()["items"]] == [101, 205]
        assert [line.product_id for line in cart.lines] == ["999"]

    def test_cancelled_confirm_returns_to_payment(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(hold=True)
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        async def run():
            task = asyncio.create_task(checkout.confirm(PaymentMethod.UPI))
            await gateway.opened.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            phase, notice = checkout.phase, checkout.last_notice
            gateway.release.set()
            return phase, notice, await checkout.confirm(PaymentMethod.UPI)

        phase, notice, retry = asyncio.run(run())

        assert phase is Phase.PAYMENT
        assert notice.level is NoticeLevel.INFO
        assert isinstance(retry, Ok)
        assert len(gateway.sessions) == 2
        assert len(order_api.create_calls) == 1

    def test_reset_after_cancelled_confirm(self, cart, book, make_gateway, order_api):
        gateway = make_gateway(hold=True)
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        async def run():
            task = asyncio.create_task(checkout.confirm(PaymentMethod.UPI))
            await gateway.opened.wait()
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        asyncio.run(run())

        assert isinstance(checkout.reset(), Ok)
        assert checkout.phase is Phase.CART
        assert isinstance(checkout.begin(), Ok)

    def test_raising_gateway_releases_checkout(self, cart, book, make_gateway, order_api):
        class CrashingGateway(make_gateway):
            crash = True

            async def present_checkout(self, handle):
                if self.crash:
                    raise RuntimeError("widget bridge crashed")
                return await super().present_checkout(handle)

        gateway = CrashingGateway()
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        with pytest.raises(RuntimeError):
            asyncio.run(checkout.confirm(PaymentMethod.CARD))

        assert checkout.phase is Phase.PAYMENT
        assert checkout.session.payment_method is None
        assert not cart.is_empty

        gateway.crash = False
        assert isinstance(asyncio.run(checkout.confirm(PaymentMethod.CARD)), Ok)

    def test_cancelled_after_payment_escalates(self, cart, book, gateway):
        async def stalled(request):
            await asyncio.Event().wait()

        orders = OrderClient(httpx.AsyncClient(transport=httpx.MockTransport(stalled), base_url="https://api.test"))
        checkout = at_payment(CheckoutOrchestrator(cart, book, gateway, orders, session_id_factory=lambda: "sess-1"))

        async def run():
            task = asyncio.create_task(checkout.confirm(PaymentMethod.UPI))
            while gateway.presented == 0:
                await asyncio.sleep(0)
            await asyncio.sleep(0.01)
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        asyncio.run(run())

        assert checkout.phase is Phase.FAILED
        assert checkout.last_notice.level is NoticeLevel.ERROR
        assert "pay_123" in checkout.last_notice.message
        assert not cart.is_empty
        assert checkout.begin().value.kind is CheckoutErrorKind.PAYMENT_UNRECORDED
        assert isinstance(checkout.reset(), Ok)

    @pytest.mark.parametrize("method", [PaymentMethod.COD, PaymentMethod.UPI])
    def test_confirm_after_success_is_refused(self, cart, book, gateway, order_api, method):
        checkout = at_payment(make_checkout(cart, book, gateway, order_api))

        async def run():
            return await checkout.confirm(method), await checkout.confirm(method)

        first, second = asyncio.run(run())

        assert isinstance(first, Ok)
        assert isinstance(second, Error)
        assert len(order_api.create_calls) == 1
