"""
Filters for bot handlers
"""
from typing import Union
from aiogram.filters import Filter
from aiogram.types import Message, CallbackQuery

from config import settings


class IsAdmin(Filter):
    """Only lets through events coming from a configured admin chat"""

    async def __call__(self, event: Union[Message, CallbackQuery]) -> bool:
        user_id = event.from_user.id if event.from_user else None
        return user_id in settings.ADMIN_CHAT_IDS
