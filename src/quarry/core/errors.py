# src/quarry/core/errors.py
"""Exceptions raised by the query builder."""

from typing import Iterable, List


class QuarryError(Exception):
    """Base class for every error raised by quarry."""


class UnknownFieldError(QuarryError, KeyError):
    """
    A field reached the predicate stage but is not a column of the entity.

    Raised instead of silently dropping the field. Configure a whitelist on
    the builder to keep arbitrary request parameters from getting this far.
    """

    def __init__(self, entity: str, field: str, valid_fields: Iterable[str] = ()):
        self.entity = entity
        self.field = field
        self.valid_fields: List[str] = sorted(valid_fields)
        super().__init__(field)

    def __str__(self) -> str:
        return (
            f"Unknown field '{self.field}' for {self.entity}. "
            f"Valid fields: {', '.join(self.valid_fields) or '(none)'}"
        )


class CoercionError(QuarryError, ValueError):
    """Raised by a coercer to leave a value untouched."""


class DuplicateBuilderError(QuarryError):
    """Two entities resolved to the same builder name in one registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A builder named '{name}' is already registered")
