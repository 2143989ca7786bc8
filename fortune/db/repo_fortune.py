"""Database operations for fortune quotes."""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fortune.db.models_fortune import FortuneEntity


class DuplicateFortuneError(Exception):
    """Raised when a quote already exists."""


async def get_all_fortunes(session: AsyncSession) -> list[str]:
    """Return every stored quote in insertion order."""
    stmt = select(FortuneEntity.quote).order_by(FortuneEntity.id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_random_fortune(session: AsyncSession) -> str | None:
    """Return one quote chosen at random, or None when there are none."""
    stmt = select(FortuneEntity.quote).order_by(func.random()).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def add_fortune(session: AsyncSession, quote: str) -> FortuneEntity:
    """Persist a new quote, raising DuplicateFortuneError if it exists."""
    existing = await session.execute(
        select(FortuneEntity.id).where(FortuneEntity.quote == quote)
    )
    if existing.first() is not None:
        raise DuplicateFortuneError(quote)

    entity = FortuneEntity(quote=quote)
    try:
        async with session.begin_nested():
            session.add(entity)
            await session.flush()
    except IntegrityError as exc:
        raise DuplicateFortuneError(quote) from exc
    return entity
