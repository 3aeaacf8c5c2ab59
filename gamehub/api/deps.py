from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gamehub.core.db import get_session
from gamehub.services.game_records import SqlGameRecords


async def get_game_records(session: AsyncSession = Depends(get_session)) -> SqlGameRecords:
    return SqlGameRecords(session)
