"""
Checkout orchestrator — drives cart, address book, pricing, gateway and
order client through one linear checkout.

Reconciliation contract:
    COD submission failure        → back to PAYMENT, retryable
    paid, then submission failure → FAILED, cart kept, support reference shown
    confirm() interrupted         → same as above, depending on whether the
                                    gateway reported a completed payment

Suspension points are the gateway and the order API; they are awaited one
after another, never concurrently. From the moment confirm() is accepted
until it returns, the phase is SUBMITTING and every other confirm() is
refused, and the submission guard refuses a second claim on the same session.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from kungfu import Result, Ok, Error

from medcart.address import Address, AddressBook, validate_address
from medcart.cart import CartStore
from medcart.formatting import support_message
from medcart.gateway import (
    PaymentGateway,
    Customer,
    SessionHandle,
    Completed,
    Cancelled,
    Failed,
)
from medcart.idempotency import SubmissionGuard
from medcart.orders import (
    OrderClient,
    Order,
    PaymentMethod,
    PaymentStatus,
)
from medcart.pricing import DeliveryPricing, DEFAULT_PRICING
from medcart.checkout._types import (
    Phase,
    CheckoutSession,
    CheckoutErrorKind,
    CheckoutError,
    Notice,
    NoticeLevel,
)

logger = logging.getLogger(__name__)

CANCELLED_NOTICE = "Payment cancelled. You can choose a payment method again."
INTERRUPTED_NOTICE = "Checkout was interrupted. You can choose a payment method again."


def new_session_id() -> str:
    return uuid.uuid4().hex


class CheckoutOrchestrator:
    """
    Example:
        checkout = CheckoutOrchestrator(cart, book, gateway, orders)
        checkout.begin()
        checkout.proceed_to_payment()
        match await checkout.confirm(PaymentMethod.UPI):
            case Ok(order): show_success(order)
            case Error(err): show(err.notice)
    """

    def __init__(
        self,
        cart: CartStore,
        addresses: AddressBook,
        gateway: PaymentGateway,
        orders: OrderClient,
        *,
        pricing: DeliveryPricing = DEFAULT_PRICING,
        guard: SubmissionGuard[Order] | None = None,
        session_id_factory: Callable[[], str] = new_session_id,
        clock: Callable[[], datetime] = datetime.now,
        customer_email: str | None = None,
    ) -> None:
        self._cart = cart
        self._addresses = addresses
        self._gateway = gateway
        self._orders = orders
        self._pricing = pricing
        self._guard: SubmissionGuard[Order] = guard if guard is not None else SubmissionGuard()
        self._new_session_id = session_id_factory
        self._clock = clock
        self._customer_email = customer_email

        self._phase = Phase.CART
        self._session: CheckoutSession | None = None
        self._last_order: Order | None = None
        self._last_notice: Notice | None = None
        self._unrecorded_error: CheckoutError | None = None
        # Set once the gateway reports a completed payment for the in-flight confirm().
        self._captured: str | None = None

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def session(self) -> CheckoutSession | None:
        return self._session

    @property
    def last_order(self) -> Order | None:
        return self._last_order

    @property
    def last_notice(self) -> Notice | None:
        return self._last_notice

    # ───────────────────────────────────────────────────────────────────────────
    # Transitions
    # ───────────────────────────────────────────────────────────────────────────

    def begin(self) -> Result[CheckoutSession, CheckoutError]:
        """CART → ADDRESS. Also starts over from SUCCESS or CANCELLED."""
        match self._phase, self._session, self._unrecorded_error:
            case Phase.SUBMITTING, _, _:
                return self._refuse(CheckoutErrorKind.CHECKOUT_IN_PROGRESS, "Checkout is already in progress")
            case Phase.FAILED, _, CheckoutError() as unrecorded:
                self._last_notice = unrecorded.notice
                return Error(unrecorded)
            case Phase.ADDRESS | Phase.PAYMENT, CheckoutSession() as current, _:
                return Ok(current)
            case _:
                pass

        if self._cart.is_empty:
            return self._refuse(CheckoutErrorKind.NO_CART_LINES, "Your cart is empty")

        self._last_notice = None
        session = CheckoutSession(id=self._new_session_id(), phase=Phase.ADDRESS)
        self._move(Phase.ADDRESS, session)
        return Ok(session)

    def proceed_to_payment(self) -> Result[CheckoutSession, CheckoutError]:
        """ADDRESS → PAYMENT with a fresh cart and address snapshot."""
        current = self._session
        if self._phase is not Phase.ADDRESS or current is None:
            return self._invalid("proceed to payment")

        if self._cart.is_empty:
            return self._refuse(CheckoutErrorKind.NO_CART_LINES, "Your cart is empty")

        address = self._addresses.selected
        if address is None:
            return self._refuse(CheckoutErrorKind.NO_ADDRESS_SELECTED, "Please select a delivery address")
        match validate_address(address.form_data()):
            case Error(err):
                return self._refuse(
                    CheckoutErrorKind.NO_ADDRESS_SELECTED,
                    f"Selected address is incomplete: {err.message}",
                )
            case Ok(_):
                pass

        subtotal = self._cart.totals().subtotal
        session = CheckoutSession(
            id=current.id,
            phase=Phase.PAYMENT,
            lines=self._cart.snapshot(),
            address=address,
            subtotal=subtotal,
            delivery_fee=self._pricing.fee(subtotal),
        )
        self._move(Phase.PAYMENT, session)
        return Ok(session)

    def back(self) -> Result[Phase, CheckoutError]:
        """PAYMENT → ADDRESS → CART."""
        match self._phase, self._session:
            case Phase.PAYMENT, CheckoutSession() as current:
                self._move(Phase.ADDRESS, CheckoutSession(id=current.id, phase=Phase.ADDRESS))
            case Phase.ADDRESS, _:
                self._move(Phase.CART, None)
            case _:
                return self._invalid("go back")
        return Ok(self._phase)

    def cancel(self) -> Result[Phase, CheckoutError]:
        """Abandon checkout from ADDRESS or PAYMENT. Submission cannot be cancelled."""
        match self._phase:
            case Phase.SUBMITTING:
                return self._refuse(
                    CheckoutErrorKind.CHECKOUT_IN_PROGRESS,
                    "Your order is being placed and cannot be cancelled",
                    retryable=False,
                )
            case Phase.ADDRESS | Phase.PAYMENT:
                self._move(Phase.CANCELLED, None)
                return Ok(self._phase)
            case _:
                return self._invalid("cancel")

    def reset(self) -> Result[Phase, CheckoutError]:
        """Back to CART from any phase except SUBMITTING. Acknowledges a FAILED checkout."""
        if self._phase is Phase.SUBMITTING:
            return self._refuse(CheckoutErrorKind.CHECKOUT_IN_PROGRESS, "Checkout is already in progress")
        self._last_notice = None
        self._unrecorded_error = None
        self._move(Phase.CART, None)
        return Ok(self._phase)

    # ───────────────────────────────────────────────────────────────────────────
    # Confirm — PAYMENT → SUBMITTING → SUCCESS | PAYMENT | FAILED
    # ───────────────────────────────────────────────────────────────────────────

    async def confirm(self, method: PaymentMethod) -> Result[Order, CheckoutError]:
        """
        Pay (online methods) and submit the order for the frozen snapshot.

        If the awaiting task is cancelled or a collaborator raises, the
        checkout is settled before the exception propagates: back to PAYMENT
        when nothing was charged, FAILED with a support reference otherwise.
        """
        if self._phase is Phase.SUBMITTING:
            return self._refuse(CheckoutErrorKind.CHECKOUT_IN_PROGRESS, "Checkout is already in progress")
        current = self._session
        if self._phase is not Phase.PAYMENT or current is None or current.address is None:
            return self._invalid("confirm payment")
        address = current.address

        # Freeze the snapshot the charge and the order both use.
        if self._cart.is_empty:
            return self._refuse(CheckoutErrorKind.NO_CART_LINES, "Your cart is empty")
        subtotal = self._cart.totals().subtotal
        session = replace(
            current,
            phase=Phase.SUBMITTING,
            lines=self._cart.snapshot(),
            subtotal=subtotal,
            delivery_fee=self._pricing.fee(subtotal),
            payment_method=method,
        )
        self._captured = None
        self._move(Phase.SUBMITTING, session)

        try:
            match await self._guard.acquire(session.id):
                case Error(err):
                    self._move(Phase.PAYMENT, _at(session, Phase.PAYMENT))
                    return self._refuse(CheckoutErrorKind.ALREADY_SUBMITTED, err.message, retryable=False)
                case Ok(_):
                    pass

            if not method.uses_gateway:
                return await self._submit_cod(session, address)
            return await self._pay_and_submit(session, address, method)
        except BaseException as exc:
            if self._phase is Phase.SUBMITTING:
                await self._interrupted(exc)
            raise

    async def _submit_cod(self, session: CheckoutSession, address: Address) -> Result[Order, CheckoutError]:
        match await self._orders.submit(address, session.lines, session.delivery_fee, PaymentMethod.COD):
            case Ok(receipt):
                return await self._succeed(session, address, PaymentMethod.COD, receipt.order_id, receipt.user_id, None)
            case Error(err):
                logger.warning("COD order submission failed for %s: %s", session.id, err.message)
                return await self._back_to_payment(
                    session,
                    CheckoutErrorKind.ORDER_SUBMISSION_FAILED,
                    f"Could not place your order: {err.message}",
                )

    async def _pay_and_submit(
        self, session: CheckoutSession, address: Address, method: PaymentMethod
    ) -> Result[Order, CheckoutError]:
        customer = Customer(name=address.full_name, phone=address.phone, email=self._customer_email)

        match await self._gateway.create_session(session.grand_total, customer):
            case Error(err):
                logger.warning("Gateway session failed for %s: %s", session.id, err.message)
                return await self._back_to_payment(
                    session, CheckoutErrorKind.GATEWAY_SESSION_FAILED, err.message,
                )
            case Ok(handle):
                pass

        session = replace(session, gateway_session=handle)
        self._session = session

        match await self._gateway.present_checkout(handle):
            case Cancelled():
                logger.info("Payment cancelled for %s", session.id)
                return await self._back_to_payment(session, CheckoutErrorKind.GATEWAY_CANCELLED, CANCELLED_NOTICE)
            case Failed(reason):
                logger.warning("Payment failed for %s: %s", session.id, reason)
                return await self._back_to_payment(session, CheckoutErrorKind.GATEWAY_FAILED, reason)
            case Completed(reference):
                self._captured = reference

        logger.info("Payment %s completed for %s", reference, session.id)
        match await self._orders.submit(address, session.lines, session.delivery_fee, method):
            case Ok(receipt):
                return await self._succeed(session, address, method, receipt.order_id, receipt.user_id, reference)
            case Error(err):
                return await self._unrecorded(session, handle, reference, err.message)

    # ───────────────────────────────────────────────────────────────────────────
    # Outcomes
    # ───────────────────────────────────────────────────────────────────────────

    async def _succeed(
        self,
        session: CheckoutSession,
        address: Address,
        method: PaymentMethod,
        order_id: int,
        user_id: int | None,
        payment_reference: str | None,
    ) -> Result[Order, CheckoutError]:
        order = Order(
            order_id=order_id,
            user_id=user_id,
            items=session.lines,
            address=address,
            total_amount=session.subtotal,
            delivery_charge=session.delivery_fee,
            payment_method=method,
            payment_status=PaymentStatus.SUCCESS if method.uses_gateway else PaymentStatus.PENDING,
            created_at=self._clock(),
            payment_reference=payment_reference,
        )

        # Order of effects: record the order, take the ordered units out of the cart, drop the session,
        # then settle the guard.
        self._last_order = order
        for line in session.lines:
            self._cart.set_quantity(line.product_id, self._cart.quantity_of(line.product_id) - line.quantity)
        self._last_notice = Notice(NoticeLevel.INFO, f"Order #{order_id} placed")
        self._move(Phase.SUCCESS, None)
        await self._guard.complete(session.id, order)
        return Ok(order)

    async def _back_to_payment(
        self, session: CheckoutSession, kind: CheckoutErrorKind, message: str
    ) -> Result[Order, CheckoutError]:
        await self._guard.release(session.id)
        self._move(Phase.PAYMENT, _at(session, Phase.PAYMENT))
        return self._refuse(kind, message)

    async def _unrecorded(
        self,
        session: CheckoutSession,
        handle: SessionHandle,
        payment_reference: str,
        reason: str,
    ) -> Result[Order, CheckoutError]:
        reference = payment_reference or handle.order_ref
        logger.error(
            "Payment %s captured but order submission failed for %s (order ref %s): %s",
            reference, session.id, handle.order_ref, reason,
        )
        await self._guard.fail(session.id, reason)
        self._move(Phase.FAILED, replace(session, phase=Phase.FAILED))
        self._unrecorded_error = CheckoutError(
            CheckoutErrorKind.PAYMENT_UNRECORDED,
            support_message(reference),
            retryable=False,
            reference=reference,
        )
        self._last_notice = self._unrecorded_error.notice
        return Error(self._unrecorded_error)

    async def _interrupted(self, exc: BaseException) -> None:
        session = self._session
        if session is None:
            self._move(Phase.CART, None)
            return
        reason = f"confirm interrupted: {type(exc).__name__}"

        match self._captured, session.gateway_session:
            case str() as reference, SessionHandle() as handle:
                await self._unrecorded(session, handle, reference, reason)
            case _:
                logger.warning("Checkout %s interrupted before payment: %r", session.id, exc)
                await self._back_to_payment(session, CheckoutErrorKind.INTERRUPTED, INTERRUPTED_NOTICE)

    # ───────────────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────────────

    def _move(self, phase: Phase, session: CheckoutSession | None) -> None:
        if phase is not self._phase:
            logger.info("Checkout %s → %s", self._phase.name, phase.name)
        self._phase = phase
        self._session = session

    def _refuse[T](
        self,
        kind: CheckoutErrorKind,
        message: str,
        *,
        retryable: bool = True,
        reference: str | None = None,
    ) -> Result[T, CheckoutError]:
        error = CheckoutError(kind, message, retryable, reference)
        self._last_notice = error.notice
        return Error(error)

    def _invalid[T](self, action: str) -> Result[T, CheckoutError]:
        return self._refuse(
            CheckoutErrorKind.INVALID_TRANSITION,
            f"Cannot {action} while checkout is {self._phase.name.lower()}",
        )


def _at(session: CheckoutSession, phase: Phase) -> CheckoutSession:
    return replace(session, phase=phase, payment_method=None, gateway_session=None)


__all__ = ("CheckoutOrchestrator", "new_session_id", "CANCELLED_NOTICE", "INTERRUPTED_NOTICE")
