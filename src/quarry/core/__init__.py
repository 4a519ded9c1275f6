"""Core pieces of quarry: configuration, errors, logging and the query engine."""

from quarry.core.config import BuilderOptions
from quarry.core.errors import CoercionError, DuplicateBuilderError, QuarryError, UnknownFieldError
from quarry.core.logging import Logger, color_palette, log

__all__ = [
    "BuilderOptions",
    "CoercionError",
    "DuplicateBuilderError",
    "QuarryError",
    "UnknownFieldError",
    "Logger",
    "log",
    "color_palette",
]
