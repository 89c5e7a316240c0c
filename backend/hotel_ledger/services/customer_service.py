"""Customer registry helpers."""
from __future__ import annotations

import logging
import re
import uuid

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.errors import DuplicateName, InvalidName, NotFound, ValidationError
from hotel_ledger.models.customer import Customer
from hotel_ledger.security.sanitize import clean_name, clean_text

logger = logging.getLogger(__name__)

_PERSON_NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÿ\s'\-]+$")
_PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
_PHONE_SEPARATORS = re.compile(r"[\s.\-()]")
NAME_MIN = 2
NAME_MAX = 120
ADDRESS_MAX_LENGTH = 255


def format_person_name(raw: str, field: str) -> str:
    """Sanitize, validate and title-case a first or last name."""
    name = clean_name(raw or "")
    if not NAME_MIN <= len(name) <= NAME_MAX:
        raise InvalidName(
            f"Name must be between {NAME_MIN} and {NAME_MAX} characters", field=field
        )
    if not _PERSON_NAME_PATTERN.match(name):
        raise InvalidName(
            "Name may only contain letters, spaces, apostrophes and hyphens",
            field=field,
            value=name,
        )
    return name.title()


def normalize_phone(raw: str) -> str:
    phone = _PHONE_SEPARATORS.sub("", (raw or "").strip())
    if not _PHONE_PATTERN.match(phone):
        raise ValidationError(
            "Phone number must be in international format", field="phone_number", value=raw
        )
    return phone


async def list_customers(
    session: AsyncSession, *, search: str | None = None, skip: int = 0, limit: int = 50
) -> list[Customer]:
    stmt = select(Customer).order_by(Customer.last_name.asc(), Customer.first_name.asc())
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Customer.last_name.ilike(pattern),
                Customer.first_name.ilike(pattern),
                Customer.phone_number.ilike(pattern),
            )
        )
    result = await session.execute(stmt.offset(skip).limit(limit))
    return list(result.scalars().all())


async def get_customer(session: AsyncSession, *, customer_id: uuid.UUID) -> Customer | None:
    return await session.get(Customer, customer_id)


async def require_customer(session: AsyncSession, *, customer_id: uuid.UUID) -> Customer:
    customer = await get_customer(session, customer_id=customer_id)
    if customer is None:
        raise NotFound("Customer not found", customer_id=str(customer_id))
    return customer


async def _ensure_phone_free(
    session: AsyncSession, phone: str, exclude_id: uuid.UUID | None = None
) -> None:
    stmt = select(Customer.id).where(Customer.phone_number == phone)
    if exclude_id is not None:
        stmt = stmt.where(Customer.id != exclude_id)
    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing is not None:
        logger.warning("Duplicate customer phone rejected")
        raise DuplicateName(
            "A customer with this phone number already exists",
            existing_id=str(existing),
        )


async def _commit(session: AsyncSession, customer: Customer) -> Customer:
    customer_id = customer.id
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Duplicate customer phone rejected by the store")
        raise DuplicateName(
            "A customer with this phone number already exists",
            customer_id=str(customer_id) if customer_id is not None else None,
        ) from exc
    await session.refresh(customer)
    return customer


async def create_customer(
    session: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    phone_number: str,
    billing_address: str | None = None,
) -> Customer:
    customer = Customer(
        first_name=format_person_name(first_name, "first_name"),
        last_name=format_person_name(last_name, "last_name"),
        phone_number=normalize_phone(phone_number),
        billing_address=clean_text(billing_address, ADDRESS_MAX_LENGTH),
    )
    await _ensure_phone_free(session, customer.phone_number)
    session.add(customer)
    customer = await _commit(session, customer)
    logger.info("Customer %s created", customer.id)
    return customer


async def update_customer(
    session: AsyncSession,
    *,
    customer: Customer,
    first_name: str | None = None,
    last_name: str | None = None,
    phone_number: str | None = None,
    billing_address: str | None = None,
) -> Customer:
    if first_name is not None:
        customer.first_name = format_person_name(first_name, "first_name")
    if last_name is not None:
        customer.last_name = format_person_name(last_name, "last_name")
    if phone_number is not None:
        phone = normalize_phone(phone_number)
        await _ensure_phone_free(session, phone, exclude_id=customer.id)
        customer.phone_number = phone
    if billing_address is not None:
        customer.billing_address = clean_text(billing_address, ADDRESS_MAX_LENGTH)
    return await _commit(session, customer)
