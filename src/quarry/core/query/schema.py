# src/quarry/core/query/schema.py
from typing import Any, Dict

from sqlalchemy import Table, inspect
from sqlalchemy.orm import Mapper
from sqlalchemy.sql.elements import ColumnElement

from ..errors import UnknownFieldError


def entity_name(entity: Any) -> str:
    if isinstance(entity, Table):
        return entity.name
    return getattr(entity, "__name__", type(entity).__name__)


def column_map(entity: Any) -> Dict[str, ColumnElement]:
    """
    Map every queryable field name of `entity` to the column it filters on.

    Mapped classes are keyed by attribute name, which can differ from the
    database column name. Core tables are keyed by column name.
    """
    if isinstance(entity, Table):
        return {column.name: column for column in entity.columns}

    mapper = inspect(entity, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise TypeError(f"Expected a mapped class or Table, got {entity!r}")
    return {prop.key: getattr(entity, prop.key) for prop in mapper.column_attrs}


def resolve_field(entity: Any, columns: Dict[str, ColumnElement], field: str) -> ColumnElement:
    try:
        return columns[field]
    except KeyError:
        raise UnknownFieldError(entity_name(entity), field, columns) from None
