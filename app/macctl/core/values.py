"""Value equality, type inference and ``defaults`` value formatting.

Preference values come back from ``defaults read`` as text, so equality
between a declared value and an observed one has to be loose across
numbers and strings while staying strict for everything else.
"""

import json
import math
from typing import Any

from macctl.models.config import ValueType


def _is_number(value: object) -> bool:
    """True for int and float, but not bool (bool subclasses int)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_to_str(value: int | float) -> str:
    """Render a number the way it reads back from ``defaults``.

    Integral floats drop their fractional part, so ``5.0`` renders ``"5"``.

    Args:
        value: Number to render.

    Returns:
        Shortest text form of the number.
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def values_equal(a: Any, b: Any) -> bool:
    """Decide whether a declared and an observed value are the same.

    bool/bool, number/number and str/str compare directly. A number and a
    string compare by the string form of the number. Every other pair
    (including bool against number, lists and dicts) compares by canonical
    JSON, which keeps lists order-sensitive.

    Args:
        a: First value.
        b: Second value.

    Returns:
        True if the values are considered equal.
    """
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if _is_number(a) and isinstance(b, str):
        return number_to_str(a) == b
    if isinstance(a, str) and _is_number(b):
        return a == number_to_str(b)
    return _canonical(a) == _canonical(b)


def infer_type(value: Any) -> ValueType:
    """Infer the ``defaults`` wire type of a value.

    Args:
        value: Declared value.

    Returns:
        BOOL, INT (integral numbers), FLOAT, STRING, ARRAY or DICT.
        Unknown shapes fall back to STRING.
    """
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        return ValueType.INT
    if isinstance(value, float):
        return ValueType.INT if value.is_integer() else ValueType.FLOAT
    if isinstance(value, (list, tuple)):
        return ValueType.ARRAY
    if isinstance(value, dict):
        return ValueType.DICT
    return ValueType.STRING


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return number_to_str(value)
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def format_value(value: Any, value_type: ValueType | None = None) -> list[str]:
    """Format a value as the type flag and arguments of ``defaults write``.

    Args:
        value: Value to write.
        value_type: Explicit wire type; inferred when None.

    Returns:
        Argument list such as ``["-bool", "true"]`` or ``["-array", "a", "b"]``.
    """
    resolved = value_type or infer_type(value)

    if resolved == ValueType.BOOL:
        if isinstance(value, str):
            return ["-bool", value]
        return ["-bool", "true" if value else "false"]
    if resolved == ValueType.INT:
        if isinstance(value, float) and value.is_integer():
            return ["-int", str(int(value))]
        return ["-int", _scalar_text(value)]
    if resolved == ValueType.FLOAT:
        return ["-float", _scalar_text(value)]
    if resolved == ValueType.ARRAY:
        items = value if isinstance(value, (list, tuple)) else [value]
        return ["-array", *(_scalar_text(item) for item in items)]
    if resolved == ValueType.DICT:
        args = ["-dict"]
        if isinstance(value, dict):
            for key, item in value.items():
                args.extend([str(key), _scalar_text(item)])
        return args
    return ["-string", _scalar_text(value)]


def _parse_plist_array(output: str) -> list[str]:
    """Parse the old-style plist array ``defaults read`` prints."""
    inner = output[1:-1].strip()
    if not inner:
        return []
    items: list[str] = []
    for line in inner.splitlines():
        item = line.strip().rstrip(",").strip()
        if not item:
            continue
        if len(item) >= 2 and item[0] == item[-1] == '"':
            item = item[1:-1]
        items.append(item)
    return items


def parse_defaults_output(output: str) -> Any:
    """Parse the text printed by ``defaults read <domain> <key>``.

    Args:
        output: Raw command output.

    Returns:
        True/False for boolean spellings, int or float when the text
        round-trips as a number, a list of strings for plist arrays, and
        the stripped text otherwise.
    """
    text = output.strip()

    if text == "1" or text.lower() == "true":
        return True
    if text == "0" or text.lower() == "false":
        return False

    try:
        number = int(text)
    except ValueError:
        pass
    else:
        if str(number) == text:
            return number

    try:
        real = float(text)
    except ValueError:
        pass
    else:
        if number_to_str(real) == text:
            return real

    if text.startswith("(") and text.endswith(")"):
        return _parse_plist_array(text)

    return text
