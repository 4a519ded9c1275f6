# src/quarry/core/query/builder.py
from typing import Any, Callable, Collection, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import select
from sqlalchemy.sql import Select

from ..config import BuilderOptions
from ..errors import UnknownFieldError
from ..logging import color_palette, log
from .naming import builder_name
from .preprocess import Coercer, preprocess
from .schema import column_map, entity_name, resolve_field
from .whitelist import whitelist_filter

Pair = Tuple[str, Any]
Params = Union[Mapping[str, Any], Sequence[Pair]]
# (query, value, remaining pairs) -> query
Override = Callable[[Any, Any, List[Pair]], Any]


def to_pairs(params: Params) -> List[Pair]:
    """Flatten request parameters into an ordered list of (field, value) pairs."""
    if isinstance(params, Mapping):
        return list(params.items())
    return [(field, value) for field, value in params]


class QueryBuilder:
    """
    Builds a filtered SQLAlchemy query from a flat mapping of request parameters.

    Each (field, value) pair adds `column == value` to the query, unless an
    override is registered for that field:

        posts = QueryBuilder(Post, whitelist=["title", "published"])

        @posts.override("title")
        def title(query, value, tail):
            query = query.where(Post.title.ilike(f"%{value}%"))
            return posts.apply(query, tail)

    An override that returns its query without calling `apply` stops the
    iteration, and the remaining pairs are ignored. Each override that does
    call `apply` nests one more call, so a parameter list repeating such a
    field more than a few hundred times hits `RecursionError`.
    """

    def __init__(
        self,
        model: Any,
        whitelist: Optional[Collection[str]] = None,
        overrides: Optional[Mapping[str, Override]] = None,
        coercers: Optional[Sequence[Coercer]] = None,
    ):
        self.model = model
        if isinstance(whitelist, str):
            raise TypeError(f"whitelist must be a collection of field names, not the string {whitelist!r}")
        self.whitelist = list(whitelist) if whitelist is not None else None
        self.overrides: Dict[str, Override] = dict(overrides or {})
        self.coercers: List[Coercer] = list(coercers or [])
        self.columns = column_map(model)
        self.name = builder_name(model)

    @classmethod
    def from_options(cls, options: Union[BuilderOptions, Mapping[str, Any]], **kwargs) -> "QueryBuilder":
        """Create a builder from `{"with": Model, "whitelist": [...]}` style options."""
        if not isinstance(options, BuilderOptions):
            options = BuilderOptions.model_validate(options)
        return cls(options.model, whitelist=options.whitelist, **kwargs)

    def __repr__(self) -> str:
        return f"<QueryBuilder {self.name} for {entity_name(self.model)}>"

    def __call__(self, params: Params, query: Optional[Any] = None) -> Any:
        return self.build(params, query)

    def override(self, field: str) -> Callable[[Override], Override]:
        """Decorator registering a custom handler for `field`."""
        def decorator(fn: Override) -> Override:
            self.overrides[field] = fn
            return fn
        return decorator

    def initial_query(self) -> Select:
        return select(self.model)

    def build(self, params: Params, query: Optional[Any] = None) -> Any:
        """
        Whitelist, coerce and apply `params` on top of `query`.

        Starts from `select(model)` when no query is given.
        """
        pairs = whitelist_filter(to_pairs(params), self.whitelist)
        pairs = preprocess(pairs, self.coercers)
        if query is None:
            query = self.initial_query()
        return self.apply(query, pairs)

    def apply(self, query: Any, pairs: List[Pair]) -> Any:
        """
        Add one predicate per pair, in order.

        Overrides receive the query, the value and the pairs left after
        theirs, and return the final query themselves. Raises
        `UnknownFieldError` when a pair without an override names no column.
        """
        for index, (field, value) in enumerate(pairs):
            handler = self.overrides.get(field)
            if handler is not None:
                log.debug(f"{self.name}: override {color_palette['override'](field)}")
                return handler(query, value, pairs[index + 1:])

            query = self.where(query, field, value)

        return query

    def where(self, query: Any, field: str, value: Any) -> Any:
        """The default predicate: `field == value`."""
        try:
            column = resolve_field(self.model, self.columns, field)
        except UnknownFieldError:
            log.error(f"{self.name}: unknown field {color_palette['field'](field)}")
            raise
        log.debug(f"{self.name}: {color_palette['field'](field)} == {color_palette['value'](repr(value))}")
        return query.where(column == value)


def build(
    model: Any,
    whitelist: Optional[Collection[str]],
    params: Params,
    query: Optional[Any] = None,
) -> Any:
    """One-shot entry point: whitelist, coerce and apply `params` for `model`."""
    return QueryBuilder(model, whitelist=whitelist).build(params, query)
