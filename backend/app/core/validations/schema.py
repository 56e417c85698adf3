from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.response import CustomHTTPException


async def validate_relations(session: AsyncSession, validation: dict[str, tuple]):
    errors = {}
    for key, (schema, value) in validation.items():
        if value is None:
            continue
        if not await session.scalar(select(exists().where(schema.id == value))):
            errors[key] = f"invalid {key}"
    if errors:
        raise CustomHTTPException(
            status_code=400,
            message="Invalid Request",
            error_code="INVALID_REQUEST",
            errors=errors,
        )
    return True


async def validate_unique(
    session: AsyncSession,
    unique: dict[str, tuple],
    exclude_id: int | None = None,
    message: str = "Invalid Request",
    error_code: str = "INVALID_REQUEST",
):
    """
    Check that no other row holds the given column values.

    :param unique: mapping of column name to ``(model, value)``
    :param exclude_id: id of the row being updated, ignored in the lookup
    """
    errors = {}
    for key, (schema, value) in unique.items():
        if not value:
            continue
        query = exists().where(getattr(schema, key) == value)
        if exclude_id is not None:
            query = query.where(schema.id != exclude_id)
        if await session.scalar(select(query)):
            errors[key] = f"{key} already exists"
    if errors:
        raise CustomHTTPException(
            status_code=400, message=message, error_code=error_code, errors=errors
        )
    return True
