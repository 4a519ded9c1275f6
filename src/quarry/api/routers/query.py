# src/quarry/api/routers/query.py
from typing import Any, Callable, List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, create_model
from sqlalchemy import Table
from sqlalchemy.orm import Session

from ...core.errors import UnknownFieldError
from ...core.logging import color_palette, log
from ...core.query.builder import QueryBuilder
from ...core.query.naming import model_name
from ...core.query.schema import entity_name


class QueryRouter:
    """Mounts a GET route that filters an entity with the query string."""

    def __init__(
        self,
        builder: QueryBuilder,
        db_dependency: Callable[..., Session],
        router: APIRouter,
        prefix: str = "",
    ):
        self.builder = builder
        self.db_dependency = db_dependency
        self.router = router
        self.prefix = prefix
        self.pydantic_model = self._create_pydantic_model()

    def _get_route_path(self) -> str:
        return f"{self.prefix}/{model_name(self.builder.model)}"

    def generate_routes(self) -> None:
        self._add_read_route()
        log.success(f"Generated READ route {color_palette['builder'](self._get_route_path())}")

    def _add_read_route(self):
        builder = self.builder
        # Core tables return rows, mapped classes return instances.
        returns_rows = isinstance(builder.model, Table)

        @self.router.get(
            self._get_route_path(),
            response_model=List[self.pydantic_model],
            summary=f"Filter {entity_name(builder.model)} records",
        )
        def read_resources(
            request: Request,
            db: Session = Depends(self.db_dependency),
        ) -> List[Any]:
            try:
                query = builder.build(request.query_params.multi_items())
            except UnknownFieldError as e:
                raise HTTPException(
                    status_code=400,
                    detail={"message": str(e), "field": e.field, "valid_fields": e.valid_fields},
                )
            except RecursionError:
                raise HTTPException(status_code=400, detail={"message": "Too many query parameters"})

            result = db.execute(query)
            if returns_rows:
                return [dict(row) for row in result.mappings()]
            return list(result.scalars())

    def _create_pydantic_model(self) -> Type[BaseModel]:
        fields = {}
        for name, column in self.builder.columns.items():
            try:
                python_type = column.type.python_type
            except NotImplementedError:
                python_type = Any
            fields[name] = (Optional[python_type], None)

        return create_model(
            f"{entity_name(self.builder.model).capitalize()}Model",
            **fields,
            __config__=ConfigDict(from_attributes=True),
        )
