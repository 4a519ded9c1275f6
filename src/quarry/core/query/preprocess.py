# src/quarry/core/query/preprocess.py
"""
Best-effort coercion of raw parameter values.

The only built-in rule turns the literals "true" and "false" into booleans.
Anything else stays a string unless the builder was given extra coercers.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

from rich.markup import escape

from ..logging import color_palette, log

Pair = Tuple[str, Any]
Coercer = Callable[[str, Any], Any]

BOOLEAN_LITERALS = {"true": True, "false": False}


def coerce_boolean(field: str, value: Any) -> Any:
    if isinstance(value, str) and value in BOOLEAN_LITERALS:
        return BOOLEAN_LITERALS[value]
    return value


def _coerce(field: str, value: Any, coercer: Coercer) -> Any:
    try:
        return coercer(field, value)
    except Exception as e:
        log.warn(
            f"Could not coerce {color_palette['field'](field)}="
            f"{color_palette['value'](repr(value))}, keeping it as is: {escape(str(e))}"
        )
        return value


def preprocess(pairs: List[Pair], coercers: Optional[Sequence[Coercer]] = None) -> List[Pair]:
    """
    Coerce each value in order. Boolean literals first, then any extra coercers.

    A coercer that raises leaves the value as it was, so one bad parameter
    never aborts the rest. Raise `CoercionError` to say so on purpose.
    """
    chain: List[Coercer] = [coerce_boolean, *(coercers or ())]
    result: List[Pair] = []
    for field, value in pairs:
        for coercer in chain:
            value = _coerce(field, value, coercer)
        result.append((field, value))
    return result
