"""The query engine: whitelist filter, value preprocessor and predicate reducer."""

from quarry.core.query.builder import QueryBuilder, build, to_pairs
from quarry.core.query.naming import builder_name, underscore
from quarry.core.query.preprocess import coerce_boolean, preprocess
from quarry.core.query.registry import BuilderRegistry
from quarry.core.query.whitelist import whitelist_filter

__all__ = [
    "QueryBuilder",
    "BuilderRegistry",
    "build",
    "builder_name",
    "coerce_boolean",
    "preprocess",
    "to_pairs",
    "underscore",
    "whitelist_filter",
]
