__all__ = ["chain_item", "chain_get", "chain_item_typed", "chain_get_typed"]

from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

T = TypeVar("T")

_MISSING = object()


def _lookup(d: Mapping, keys: Tuple) -> Any:
    node: Any = d
    for k in keys:
        if not isinstance(node, Mapping) or k not in node:
            return _MISSING
        node = node[k]
    return node


def chain_item(d: Mapping, *keys):
    """``d[k1][k2]...``; raises ``KeyError`` with the full key path."""
    result = _lookup(d, keys)
    if result is _MISSING:
        raise KeyError(keys)
    return result


def chain_get(d: Mapping, *keys, default=None):
    result = _lookup(d, keys)
    return default if result is _MISSING else result


def _convert(value, t: Type[T], keys, allow_convert: bool) -> T:
    # bool is an int subclass, but a flag is never a valid count
    if isinstance(value, t) and not (t is not bool and isinstance(value, bool)):
        return value
    if not allow_convert:
        raise TypeError(keys, f"{t} expected but {type(value)} found")
    try:
        return t(value)  # type: ignore
    except (TypeError, ValueError) as e:
        raise TypeError(keys, f"cannot convert {value!r} to {t}") from e


def chain_item_typed(d: Mapping, t: Type[T], *keys, allow_convert: bool = False) -> T:
    return _convert(chain_item(d, *keys), t, keys, allow_convert)


def chain_get_typed(
    d: Mapping,
    t: Type[T],
    *keys,
    default: Optional[T] = None,
    allow_convert: bool = False,
) -> Optional[T]:
    result = chain_get(d, *keys)
    if result is None:
        return default
    return _convert(result, t, keys, allow_convert)
