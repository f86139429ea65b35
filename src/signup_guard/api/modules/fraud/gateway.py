import operator
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Callable, Generic, NamedTuple, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from signup_guard.database.base import Base

ModelT = TypeVar("ModelT", bound=Base)

RANGE_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    ">=": operator.ge,
    ">": operator.gt,
    "<=": operator.le,
    "<": operator.lt,
}


class RangeFilter(NamedTuple):
    field: str
    op: str
    value: Any


def _bind_value(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(UTC)
    return value


def build_filters(
    model: type[Base],
    equals: Mapping[str, Any],
    ranges: Sequence[RangeFilter] = (),
) -> list[ColumnElement[bool]]:
    filters: list[ColumnElement[bool]] = []
    for field, value in equals.items():
        filters.append(getattr(model, field) == _bind_value(value))
    for item in ranges:
        compare = RANGE_OPERATORS[item.op]
        filters.append(compare(getattr(model, item.field), _bind_value(item.value)))
    return filters


class RecordGateway(Generic[ModelT]):
    def __init__(self, session: AsyncSession, model: type[ModelT]):
        self.session = session
        self.model = model

    async def get_total_count(self, filters: list[ColumnElement[bool]]) -> int:
        stmt = select(func.count()).select_from(self.model).where(*filters)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_all(
        self,
        limit: int,
        offset: int,
        filters: list[ColumnElement[bool]],
    ) -> Sequence[ModelT]:
        stmt = (
            select(self.model)
            .filter(*filters)
            .order_by(self.model.timestamp.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find(self, filters: list[ColumnElement[bool]]) -> Sequence[ModelT]:
        stmt = select(self.model).where(*filters)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def create(self, values: Mapping[str, Any]) -> ModelT:
        row = self.model(**{k: _bind_value(v) for k, v in values.items()})
        self.session.add(row)
        await self.session.flush()
        return row


def row_to_dict(row: Base) -> dict[str, Any]:
    return {
        attr.key: getattr(row, attr.key)
        for attr in row.__mapper__.column_attrs
    }


__all__ = ("RangeFilter", "RecordGateway", "build_filters", "row_to_dict")
