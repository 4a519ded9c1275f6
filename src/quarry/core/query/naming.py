# src/quarry/core/query/naming.py
"""Builder identifiers derived from entity names: `App.FooBarBaz` -> `build_foo_bar_baz_query`."""

import re
from typing import Any

from sqlalchemy import Table

_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD = re.compile(r"([a-z\d])([A-Z])")


def underscore(name: str) -> str:
    """
    Convert a CamelCase name to snake_case.

    >>> underscore("FooBarBaz")
    'foo_bar_baz'
    >>> underscore("HTTPRequest")
    'http_request'
    """
    name = _ACRONYM.sub(r"\1_\2", name)
    name = _WORD.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def model_name(entity: Any) -> str:
    """Last dotted segment of the entity's name, underscored."""
    if isinstance(entity, Table):
        qualified = entity.name
    elif isinstance(entity, str):
        qualified = entity
    else:
        qualified = getattr(entity, "__qualname__", None) or entity.__name__
    return underscore(qualified.split(".")[-1])


def builder_name(entity: Any) -> str:
    return f"build_{model_name(entity)}_query"
