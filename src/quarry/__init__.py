"""
quarry: build filtered SQLAlchemy queries from flat request parameters.
"""

from quarry.core.config import BuilderOptions
from quarry.core.errors import CoercionError, DuplicateBuilderError, QuarryError, UnknownFieldError
from quarry.core.query import (
    BuilderRegistry,
    QueryBuilder,
    build,
    builder_name,
    preprocess,
    whitelist_filter,
)

__version__ = "0.1.0"

__all__ = [
    "BuilderOptions",
    "BuilderRegistry",
    "CoercionError",
    "DuplicateBuilderError",
    "QuarryError",
    "QueryBuilder",
    "UnknownFieldError",
    "build",
    "builder_name",
    "preprocess",
    "whitelist_filter",
]
