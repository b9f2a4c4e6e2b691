"""
Repository for per-user settings.
"""

import logging
from typing import Optional, Dict, Any

from sqlalchemy import select

from config import settings
from ..connection import get_database
from ..models import UserSettingsDB
from ...models.user_settings import UserSettings
from ...utils.datetime_utils import get_utc_now

logger = logging.getLogger(__name__)


class UserSettingsRepository:
    """Repository for user settings operations."""

    def __init__(self):
        self.db = get_database()

    async def get(self, user_id: str) -> Optional[UserSettings]:
        """Get a user's settings, or None if never saved."""
        async with self.db.session() as session:
            result = await session.execute(
                select(UserSettingsDB).where(UserSettingsDB.user_id == user_id)
            )
            row = result.scalar_one_or_none()
            return UserSettings.model_validate(row) if row else None

    async def upsert(self, user_id: str, updates: Dict[str, Any]) -> UserSettings:
        """
        Apply a partial update, creating the row if missing.

        Keys with a None value are ignored, so omitted fields keep their
        stored values.
        """
        updates = {k: v for k, v in updates.items() if v is not None}

        async with self.db.session() as session:
            result = await session.execute(
                select(UserSettingsDB).where(UserSettingsDB.user_id == user_id)
            )
            row = result.scalar_one_or_none()

            if row is None:
                row = UserSettingsDB(
                    user_id=user_id,
                    daily_work_hours=settings.daily_work_hours,
                    context_switching_minutes=settings.context_switching_minutes,
                )
                session.add(row)

            for key, value in updates.items():
                if hasattr(UserSettingsDB, key):
                    setattr(row, key, value)
                else:
                    logger.warning(f"Ignoring unknown settings field: {key}")

            row.updated_at = get_utc_now()
            await session.flush()

            logger.info(f"Updated settings for {user_id}: {sorted(updates)}")
            return UserSettings.model_validate(row)


_user_settings_repository: Optional[UserSettingsRepository] = None


def get_user_settings_repository() -> UserSettingsRepository:
    """Get the user settings repository singleton."""
    global _user_settings_repository
    if _user_settings_repository is None:
        _user_settings_repository = UserSettingsRepository()
    return _user_settings_repository
