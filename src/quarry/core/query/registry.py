# src/quarry/core/query/registry.py
from typing import Any, Collection, Dict, Iterator, Mapping, Optional, Sequence

from ..errors import DuplicateBuilderError
from ..logging import color_palette, log
from .builder import Override, QueryBuilder
from .naming import builder_name
from .preprocess import Coercer
from .schema import entity_name


class BuilderRegistry:
    """
    Holds one QueryBuilder per entity, named after the entity.

        queries = BuilderRegistry()
        queries.register(Post, whitelist=["title", "published"])
        queries.build_post_query({"title": "hello"})
    """

    def __init__(self):
        self.builders: Dict[str, QueryBuilder] = {}

    def register(
        self,
        model: Any,
        whitelist: Optional[Collection[str]] = None,
        overrides: Optional[Mapping[str, Override]] = None,
        coercers: Optional[Sequence[Coercer]] = None,
    ) -> QueryBuilder:
        return self.add(QueryBuilder(model, whitelist=whitelist, overrides=overrides, coercers=coercers))

    def add(self, builder: QueryBuilder) -> QueryBuilder:
        if builder.name in self.builders:
            raise DuplicateBuilderError(builder.name)
        self.builders[builder.name] = builder
        log.info(
            f"Registered {color_palette['builder'](builder.name)} "
            f"for {color_palette['entity'](entity_name(builder.model))}"
        )
        return builder

    def get(self, model: Any) -> QueryBuilder:
        return self.builders[builder_name(model)]

    def describe(self) -> None:
        from quarry.ui import display_builder

        log.section("Query Builders")
        log.table(
            headers=["Builder", "Entity", "Whitelist", "Overrides"],
            rows=[
                [
                    builder.name,
                    entity_name(builder.model),
                    ", ".join(builder.whitelist) if builder.whitelist is not None else "all",
                    ", ".join(builder.overrides) or "-",
                ]
                for builder in self.builders.values()
            ],
        )
        for builder in self.builders.values():
            log.info(f"Fields of {color_palette['builder'](builder.name)}")
            with log.indented():
                for field, handler in builder.overrides.items():
                    handler_name = getattr(handler, "__name__", repr(handler))
                    log.info(f"{color_palette['field'](field)} handled by {color_palette['override'](handler_name)}")
            display_builder(builder)

    def __getitem__(self, name: str) -> QueryBuilder:
        return self.builders[name]

    def __getattr__(self, name: str) -> QueryBuilder:
        builders = self.__dict__.get("builders", {})
        if name in builders:
            return builders[name]
        raise AttributeError(f"No builder named '{name}'")

    def __contains__(self, name: str) -> bool:
        return name in self.builders

    def __iter__(self) -> Iterator[QueryBuilder]:
        return iter(self.builders.values())

    def __len__(self) -> int:
        return len(self.builders)
