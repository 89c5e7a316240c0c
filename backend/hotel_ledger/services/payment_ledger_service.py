"""Payments recorded against a reservation and the settlement state they imply.

Amount paid is the sum of every non-refund payment minus every refund, floored
at zero. Amount remaining is the reservation total minus amount paid, floored
at zero. Neither is stored: both are recomputed from the payment rows each
time they are asked for.

Over-payments are rejected, never clamped. A non-refund payment may not
exceed what is still due, and a refund may not exceed what has been paid.
Callers serialize writers by bumping the reservation's lock counter first.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.clock import Clock, coerce_utc
from hotel_ledger.core.errors import ExceedsRemaining, NotFound, ValidationError
from hotel_ledger.core.money import PAYMENT_BOUNDS, Money, check_bounds, money_sum
from hotel_ledger.models.payment import Payment, PaymentMethod, PaymentStatus, PaymentType
from hotel_ledger.models.reservation import Reservation
from hotel_ledger.security.sanitize import clean_text, clean_transaction_ref
from hotel_ledger.services import reservation_ledger_service

logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 500


@dataclass(slots=True)
class LedgerSummary:
    """Financial snapshot of one reservation."""

    reservation_id: uuid.UUID
    base_amount: Money
    services_total: Money
    total: Money
    amount_paid: Money
    amount_remaining: Money
    payment_status: PaymentStatus
    service_count: int
    payment_count: int


def _coerce_enum(enum_cls, value, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid {field}",
            field=field,
            value=str(value),
            allowed=[member.value for member in enum_cls],
        ) from exc


def _validate_paid_at(paid_at: datetime, clock: Clock) -> datetime:
    if not isinstance(paid_at, datetime):
        raise ValidationError("Payment date is required", field="paid_at")
    paid_at = coerce_utc(paid_at)
    now = coerce_utc(clock.now())
    if paid_at > now:
        raise ValidationError(
            "Payment date cannot be in the future",
            field="paid_at",
            paid_at=paid_at.isoformat(),
            now=now.isoformat(),
        )
    return paid_at


def status_for(total: Money, paid: Money) -> PaymentStatus:
    if paid.cents <= 0:
        return PaymentStatus.UNPAID
    if paid >= total:
        return PaymentStatus.COMPLETE
    return PaymentStatus.PARTIAL


async def payments(session: AsyncSession, *, reservation_id: uuid.UUID) -> list[Payment]:
    result = await session.execute(
        select(Payment)
        .where(Payment.reservation_id == reservation_id)
        .order_by(Payment.paid_at.asc(), Payment.created_at.asc())
    )
    return list(result.scalars().all())


async def payment_count(session: AsyncSession, *, reservation_id: uuid.UUID) -> int:
    stmt = select(func.count()).select_from(Payment).where(
        Payment.reservation_id == reservation_id
    )
    return int((await session.execute(stmt)).scalar_one())


async def require_payment(session: AsyncSession, *, payment_id: uuid.UUID) -> Payment:
    payment = await session.get(Payment, payment_id)
    if payment is None:
        raise NotFound("Payment not found", payment_id=str(payment_id))
    return payment


def _paid_from(rows: list[Payment], exclude_id: uuid.UUID | None = None) -> Money:
    signed = money_sum(p.signed_amount for p in rows if p.id != exclude_id)
    return Money(max(0, signed.cents))


async def amount_paid(session: AsyncSession, *, reservation_id: uuid.UUID) -> Money:
    return _paid_from(await payments(session, reservation_id=reservation_id))


async def amount_remaining(session: AsyncSession, *, reservation: Reservation) -> Money:
    total = await reservation_ledger_service.total(session, reservation=reservation)
    paid = await amount_paid(session, reservation_id=reservation.id)
    return total.subtract_clamped(paid)


async def payment_status(session: AsyncSession, *, reservation: Reservation) -> PaymentStatus:
    total = await reservation_ledger_service.total(session, reservation=reservation)
    paid = await amount_paid(session, reservation_id=reservation.id)
    return status_for(total, paid)


async def summarize(session: AsyncSession, *, reservation: Reservation) -> LedgerSummary:
    lines = await reservation_ledger_service.lines(session, reservation_id=reservation.id)
    rows = await payments(session, reservation_id=reservation.id)
    services_total = money_sum(line.subtotal for line in lines)
    total = reservation.base_amount + services_total
    paid = _paid_from(rows)
    return LedgerSummary(
        reservation_id=reservation.id,
        base_amount=reservation.base_amount,
        services_total=services_total,
        total=total,
        amount_paid=paid,
        amount_remaining=total.subtract_clamped(paid),
        payment_status=status_for(total, paid),
        service_count=len(lines),
        payment_count=len(rows),
    )


def _check_against_ledger(
    *,
    reservation: Reservation,
    amount: Money,
    payment_type: PaymentType,
    total: Money,
    paid: Money,
) -> None:
    if payment_type == PaymentType.REFUND:
        if amount > paid:
            logger.warning(
                "Refund of %s on reservation %s exceeds amount paid %s",
                amount,
                reservation.id,
                paid,
            )
            raise ExceedsRemaining(
                "Refund exceeds the amount paid",
                reservation_id=str(reservation.id),
                amount=str(amount),
                amount_paid=str(paid),
            )
        return
    remaining = total.subtract_clamped(paid)
    if amount > remaining:
        logger.warning(
            "Payment of %s on reservation %s exceeds remaining %s",
            amount,
            reservation.id,
            remaining,
        )
        raise ExceedsRemaining(
            "Payment exceeds the amount remaining",
            reservation_id=str(reservation.id),
            amount=str(amount),
            amount_remaining=str(remaining),
        )


async def record_payment(
    session: AsyncSession,
    *,
    reservation: Reservation,
    amount: Money | Decimal | str,
    method: PaymentMethod | str,
    paid_at: datetime,
    clock: Clock,
    payment_type: PaymentType | str = PaymentType.BALANCE,
    transaction_ref: str | None = None,
    comment: str | None = None,
    recorded_by_id: uuid.UUID | None = None,
) -> Payment:
    """Validate and stage a payment or refund (the caller commits)."""
    value = check_bounds(amount, PAYMENT_BOUNDS)
    method = _coerce_enum(PaymentMethod, method, "method")
    payment_type = _coerce_enum(PaymentType, payment_type, "payment_type")
    paid_at = _validate_paid_at(paid_at, clock)

    total = await reservation_ledger_service.total(session, reservation=reservation)
    paid = await amount_paid(session, reservation_id=reservation.id)
    _check_against_ledger(
        reservation=reservation,
        amount=value,
        payment_type=payment_type,
        total=total,
        paid=paid,
    )

    payment = Payment(
        reservation_id=reservation.id,
        amount=value,
        method=method,
        payment_type=payment_type,
        paid_at=paid_at,
        transaction_ref=clean_transaction_ref(transaction_ref),
        comment=clean_text(comment, COMMENT_MAX_LENGTH),
        recorded_by_id=recorded_by_id,
    )
    session.add(payment)
    await session.flush()
    return payment


async def update_payment(
    session: AsyncSession,
    *,
    payment: Payment,
    reservation: Reservation,
    clock: Clock,
    amount: Money | Decimal | str | None = None,
    method: PaymentMethod | str | None = None,
    payment_type: PaymentType | str | None = None,
    paid_at: datetime | None = None,
    transaction_ref: str | None = None,
    comment: str | None = None,
) -> tuple[Payment, dict[str, dict[str, Any]]]:
    """Apply edits to a payment and return the field-level changes.

    A new amount or type is checked against the ledger as if this payment
    had never been recorded.
    """
    changes: dict[str, dict[str, Any]] = {}
    new_amount = payment.amount if amount is None else check_bounds(amount, PAYMENT_BOUNDS)
    new_type = (
        payment.payment_type
        if payment_type is None
        else _coerce_enum(PaymentType, payment_type, "payment_type")
    )
    if new_amount != payment.amount or new_type != payment.payment_type:
        total = await reservation_ledger_service.total(session, reservation=reservation)
        rows = await payments(session, reservation_id=reservation.id)
        paid = _paid_from(rows, exclude_id=payment.id)
        _check_against_ledger(
            reservation=reservation,
            amount=new_amount,
            payment_type=new_type,
            total=total,
            paid=paid,
        )
    if new_amount != payment.amount:
        changes["amount"] = {"old": str(payment.amount), "new": str(new_amount)}
        payment.amount = new_amount
    if new_type != payment.payment_type:
        changes["payment_type"] = {"old": payment.payment_type.value, "new": new_type.value}
        payment.payment_type = new_type
    if method is not None:
        new_method = _coerce_enum(PaymentMethod, method, "method")
        if new_method != payment.method:
            changes["method"] = {"old": payment.method.value, "new": new_method.value}
            payment.method = new_method
    if paid_at is not None:
        new_paid_at = _validate_paid_at(paid_at, clock)
        old_paid_at = coerce_utc(payment.paid_at)
        if new_paid_at != old_paid_at:
            changes["paid_at"] = {
                "old": old_paid_at.isoformat(),
                "new": new_paid_at.isoformat(),
            }
            payment.paid_at = new_paid_at
    if transaction_ref is not None:
        new_ref = clean_transaction_ref(transaction_ref)
        if new_ref != payment.transaction_ref:
            changes["transaction_ref"] = {"old": payment.transaction_ref, "new": new_ref}
            payment.transaction_ref = new_ref
    if comment is not None:
        new_comment = clean_text(comment, COMMENT_MAX_LENGTH)
        if new_comment != payment.comment:
            changes["comment"] = {"old": payment.comment, "new": new_comment}
            payment.comment = new_comment
    await session.flush()
    return payment, changes


async def delete_payment(session: AsyncSession, *, payment: Payment) -> None:
    """Stage removal of a payment; the caller refreshes the reservation cache."""
    await session.delete(payment)
    await session.flush()


__all__ = [
    "COMMENT_MAX_LENGTH",
    "LedgerSummary",
    "amount_paid",
    "amount_remaining",
    "delete_payment",
    "payment_count",
    "payment_status",
    "payments",
    "record_payment",
    "require_payment",
    "status_for",
    "summarize",
    "update_payment",
]
