"""Row lookups shared by routes and services."""

from typing import TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.errors import ResourceNotFoundError

T = TypeVar("T")


async def get_or_404(db: AsyncSession, model: type[T], row_id: UUID, label: str) -> T:
    """Primary-key lookup that raises ResourceNotFoundError when absent."""
    row = await db.get(model, row_id)
    if row is None:
        raise ResourceNotFoundError(label, str(row_id))
    return row
