"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from hotel_ledger.core.config import get_settings
from hotel_ledger.db.session import get_sessionmaker
from hotel_ledger.models.user import UserRole
from hotel_ledger.services import user_service

logger = logging.getLogger(__name__)


async def ensure_default_admin() -> None:
    """Create the configured admin user if it does not exist yet."""
    settings = get_settings()
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        return
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        existing = await user_service.get_user_by_email(
            session, settings.bootstrap_admin_email
        )
        if existing is not None:
            return
        user = await user_service.create_user(
            session,
            email=settings.bootstrap_admin_email,
            password=settings.bootstrap_admin_password,
            full_name="Administrator",
            role=UserRole.ADMIN,
        )
        logger.info("Bootstrap admin %s created", user.id)
