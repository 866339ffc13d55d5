# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any, Final, Literal, TypeVar

T = TypeVar("T")


__all__ = (
    "Unset",
    "MaybeUnset",
    "SingletonType",
    "UnsetType",
    "is_sentinel",
    "is_null",
)


class _SingletonMeta(type):
    """Metaclass that guarantees exactly one instance per subclass."""

    _cache: dict[type, SingletonType] = {}

    def __call__(cls, *a, **kw):
        if cls not in cls._cache:
            cls._cache[cls] = super().__call__(*a, **kw)
        return cls._cache[cls]


class SingletonType(metaclass=_SingletonMeta):
    """Base class for falsy singleton sentinels that survive copying."""

    __slots__: tuple[str, ...] = ()

    def __deepcopy__(self, memo):  # copy & deepcopy both noop
        return self

    def __copy__(self):
        return self

    # concrete classes *must* override the two methods below
    def __bool__(self) -> bool: ...
    def __repr__(self) -> str: ...


class UnsetType(SingletonType):
    """Sentinel for a parameter present but not yet given a value.

    Example:
        >>> def func(param=Unset):
        ...     if param is not Unset:
        ...         process(param)
    """

    __slots__ = ()

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> Literal["Unset"]:
        return "Unset"

    def __reduce__(self):
        """Ensure pickle preservation of singleton identity."""
        return "Unset"


Unset: Final = UnsetType()
"""A value present but not yet provided."""

MaybeUnset = T | UnsetType
"""A value that may be unset."""


def is_sentinel(value: Any) -> bool:
    return value is Unset


def is_null(value: Any) -> bool:
    """None or a sentinel: never a valid chain element or argument."""
    return value is None or is_sentinel(value)
