# src/quarry/core/config.py
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BuilderOptions(BaseModel):
    """
    Options accepted when declaring a query builder.

    `with` is a Python keyword, so the entity is stored as `model` and
    `with` is kept as its alias:

        BuilderOptions.model_validate({"with": Post, "whitelist": ["title"]})
        BuilderOptions(model=Post)
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True, frozen=True)

    model: Any = Field(..., alias="with", description="Mapped class or Table the builder targets")
    whitelist: Optional[List[str]] = Field(
        default=None,
        description="Fields allowed in a query. Omit to allow every field.",
    )
