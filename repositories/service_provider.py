import operator
from datetime import datetime
from typing import Any, Optional

from pydantic.alias_generators import to_camel
from sqlalchemy import false, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import InvalidFilterError
from models import ServiceProvider
from repositories.base import BaseRepository

_COMPARISONS = {
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


class ServiceProviderRepository(BaseRepository[ServiceProvider]):
    """
    Store access for service providers.

    Filters, projections and sort keys use wire field names (camelCase,
    e.g. ``isVerified``). Filter values arrive as strings from the URL and are
    converted to the column's Python type before querying.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, ServiceProvider)
        # Wire name -> table column.
        self.fields = {
            to_camel(attr.key): attr.columns[0]
            for attr in inspect(self.model).column_attrs
        }

    def _coerce(self, field: str, column, raw: Any) -> Any:
        if isinstance(raw, list):
            return [self._coerce(field, column, item) for item in raw]
        if not isinstance(raw, str):
            return raw
        python_type = column.type.python_type
        try:
            if python_type is bool:
                lowered = raw.lower()
                if lowered in ("true", "1"):
                    return True
                if lowered in ("false", "0"):
                    return False
                raise ValueError(raw)
            if python_type in (int, float):
                return python_type(raw)
            if python_type is datetime:
                return datetime.fromisoformat(raw)
        except ValueError as exc:
            raise InvalidFilterError(f"Invalid value '{raw}' for field '{field}'") from exc
        return raw

    def _conditions(self, filters: dict) -> list:
        """Translate a filter mapping into SQL conditions.

        Unknown fields and unknown operators match no rows.
        """
        conditions = []
        for field, value in filters.items():
            column = self.fields.get(field)
            if column is None:
                conditions.append(false())
                continue

            if isinstance(value, dict):
                for op, operand in value.items():
                    if op == "$in":
                        if isinstance(operand, str):
                            operand = [part for part in operand.split(",") if part]
                        if not isinstance(operand, list):
                            conditions.append(false())
                            continue
                        conditions.append(column.in_(self._coerce(field, column, operand)))
                    elif op in _COMPARISONS:
                        if isinstance(operand, list):
                            operand = operand[-1]
                        if not isinstance(operand, str):
                            conditions.append(false())
                            continue
                        conditions.append(_COMPARISONS[op](column, self._coerce(field, column, operand)))
                    else:
                        conditions.append(false())
            elif isinstance(value, list):
                conditions.append(column.in_(self._coerce(field, column, value)))
            else:
                conditions.append(column == self._coerce(field, column, value))
        return conditions

    def _projection(self, fields: Optional[list[str]]) -> list:
        if not fields:
            selected = list(self.fields)
        else:
            excluded = {f[1:] for f in fields if f.startswith("-")}
            included = [f for f in fields if not f.startswith("-")]
            if included:
                # Unknown names select nothing beyond the id.
                selected = ["id"] + [f for f in included if f != "id" and f in self.fields]
            else:
                selected = [f for f in self.fields if f not in excluded]
        return [self.fields[name].label(name) for name in selected]

    async def count(self, filters: dict) -> int:
        stmt = select(func.count()).select_from(self.model).where(*self._conditions(filters))
        return await self.session.scalar(stmt) or 0

    async def find(
        self,
        filters: dict,
        fields: Optional[list[str]] = None,
        sort: Optional[list[tuple[str, bool]]] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> list[dict]:
        """Return one page of matching rows as dicts keyed by wire field name.

        Null columns are left out of each row, matching single-record responses.
        """
        stmt = select(*self._projection(fields)).where(*self._conditions(filters))

        for field, descending in sort or []:
            column = self.fields.get(field)
            if column is None:
                continue
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        # Stable ordering across pages when sort keys tie.
        stmt = stmt.order_by(self.model.id.asc())

        stmt = stmt.offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return [
            {key: value for key, value in row.items() if value is not None}
            for row in result.mappings().all()
        ]

    async def get_id_by_user(self, user_id: str) -> Optional[str]:
        stmt = select(self.model.id).where(self.model.user == user_id).order_by(self.model.id).limit(1)
        return await self.session.scalar(stmt)
