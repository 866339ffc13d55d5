# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Causal chains: the ordered lineage of objects behind an occurrence.

A chain reads root-to-effect. For example, if a block of sand is placed
where it drops, the sand block creates a falling entity, which then places
another block. The placement occurrence for the final block carries the
chain ``sand block -> falling entity``.

Chains describe causality on a best-effort basis. A lever wired through a
circuit that eventually launches a projectile may be too complicated to
trace fully, and producers are free to record only what they know.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, TypeVar, overload

from typing_extensions import Self

from ._errors import IndexOutOfRangeError, InvalidStateError, NullArgumentError
from .sentinel import is_null

T = TypeVar("T")

TypeQuery = type | tuple[type, ...]
"""Anything ``isinstance`` accepts as its second argument."""


__all__ = (
    "CausalChain",
    "ChainBuilder",
    "TypeQuery",
)

_UNHASHABLE = 0x5EED


def _require(value: Any, name: str) -> Any:
    if is_null(value):
        raise NullArgumentError.from_argument(name, value)
    return value


def _require_elements(elements: tuple, name: str) -> tuple:
    for idx, item in enumerate(elements):
        if is_null(item):
            raise NullArgumentError.from_argument(name, item, index=idx)
    return elements


def _element_hash(item: Any) -> int:
    try:
        return hash(item)
    except TypeError:
        # equal unhashable objects must still agree
        return _UNHASHABLE


class CausalChain:
    """An immutable, non-empty, root-to-effect sequence of causes.

    Elements are arbitrary objects. The first element is the root cause,
    the last one is closest to the effect. Once built a chain never
    changes, so it can be shared freely between threads and subscribers.

    Chains are created through the factories (`of`, `from_iterable`) or
    by a `ChainBuilder`, never mutated in place: the ``with_*`` and
    `merge` operations return new chains.

    Attributes:
        elements (tuple): The ordered causes. Never empty.
    """

    __slots__ = ("_elements",)

    def __init__(self, elements: Iterable[Any]) -> None:
        _require(elements, "elements")
        elements = _require_elements(tuple(elements), "elements")
        if not elements:
            raise InvalidStateError("Cannot create an empty causal chain!")
        object.__setattr__(self, "_elements", elements)

    @classmethod
    def _wrap(cls, elements: tuple) -> CausalChain:
        """Wrap an already validated, non-empty tuple."""
        chain = object.__new__(cls)
        object.__setattr__(chain, "_elements", elements)
        return chain

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------

    @staticmethod
    def builder() -> ChainBuilder:
        """Creates a new, empty `ChainBuilder`."""
        return ChainBuilder()

    @classmethod
    def of(cls, element: Any, /, *elements: Any) -> CausalChain:
        """Constructs a chain from a root cause and optional further causes.

        The bulk form keeps every given element, adjacent duplicates
        included: it inserts raw instead of going through `ChainBuilder.append`.

        Args:
            element (Any): The root cause.
            *elements (Any): Further causes, in root-to-effect order.

        Returns:
            CausalChain: The constructed chain.

        Raises:
            NullArgumentError: If any element is None or unset.
        """
        if not elements:
            _require(element, "Cause")
            return cls._wrap((element,))
        return cls.builder().append_all(elements).insert(0, element).build()

    @classmethod
    def from_iterable(cls, iterable: Iterable[Any], /) -> CausalChain:
        """Constructs a chain from an existing ordered source.

        Chains and lists are copied as they are. Any other iterable is fed
        through `ChainBuilder.append`, so back-to-back occurrences of the
        same object collapse into one.

        Args:
            iterable (Iterable[Any]): The causes, in root-to-effect order.

        Returns:
            CausalChain: The constructed chain.

        Raises:
            NullArgumentError: If the source is None or holds None.
            InvalidStateError: If the source is empty.
        """
        _require(iterable, "Causes")
        if isinstance(iterable, CausalChain):
            return cls._wrap(iterable._elements)
        if isinstance(iterable, list):
            return cls(iterable)

        builder = cls.builder()
        for item in iterable:
            builder.append(item)
        return builder.build()

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @property
    def elements(self) -> tuple[Any, ...]:
        return self._elements

    def root(self) -> Any:
        """Gets the root cause, the first element of this chain."""
        return self._elements[0]

    def first(self, target: type[T] | TypeQuery, /) -> T | None:
        """Gets the first element that is an instance of `target`.

        Args:
            target (type | tuple[type, ...]): The type(s) to look for.

        Returns:
            The first matching element, or None if nothing matches.
        """
        _require(target, "Type query")
        for item in self._elements:
            if isinstance(item, target):
                return item
        return None

    def last(self, target: type[T] | TypeQuery, /) -> T | None:
        """Gets the last element that is an instance of `target`.

        Args:
            target (type | tuple[type, ...]): The type(s) to look for.

        Returns:
            The last matching element, or None if nothing matches.
        """
        _require(target, "Type query")
        for item in reversed(self._elements):
            if isinstance(item, target):
                return item
        return None

    def _index_of_first(self, target: TypeQuery) -> int:
        for idx, item in enumerate(self._elements):
            if isinstance(item, target):
                return idx
        return -1

    def before(self, target: TypeQuery, /) -> Any | None:
        """Gets the element immediately before the first `target` instance.

        Only the first match is considered: if it is the root, the result
        is None even when later elements also match.

        Args:
            target (type | tuple[type, ...]): The type(s) to look for.

        Returns:
            The preceding element, or None.
        """
        _require(target, "Type query")
        if len(self._elements) == 1:
            return None
        idx = self._index_of_first(target)
        if idx <= 0:
            return None
        return self._elements[idx - 1]

    def after(self, target: TypeQuery, /) -> Any | None:
        """Gets the element immediately after the first `target` instance.

        Only the first match is considered.

        Args:
            target (type | tuple[type, ...]): The type(s) to look for.

        Returns:
            The following element, or None.
        """
        _require(target, "Type query")
        if len(self._elements) == 1:
            return None
        idx = self._index_of_first(target)
        if idx < 0 or idx == len(self._elements) - 1:
            return None
        return self._elements[idx + 1]

    def contains_type(self, target: TypeQuery, /) -> bool:
        """Returns whether any element is an instance of `target`."""
        _require(target, "Type query")
        return any(isinstance(item, target) for item in self._elements)

    def contains(self, value: Any, /) -> bool:
        """Returns whether any element is equal to `value`.

        This compares with ``==``, unlike the identity check that
        `ChainBuilder.append` uses to drop repeated causes.
        """
        return value in self._elements

    def all_of(self, target: type[T] | TypeQuery, /) -> tuple[T, ...]:
        """Gets all elements that are instances of `target`, in order."""
        _require(target, "Type query")
        return tuple(item for item in self._elements if isinstance(item, target))

    def none_of(self, ignored: TypeQuery, /) -> tuple[Any, ...]:
        """Gets all elements that are not instances of `ignored`, in order."""
        _require(ignored, "Type query")
        return tuple(
            item for item in self._elements if not isinstance(item, ignored)
        )

    def all(self) -> tuple[Any, ...]:
        """Gets every element of this chain as a read-only tuple."""
        return self._elements

    # ------------------------------------------------------------------
    # derivation
    # ------------------------------------------------------------------

    def with_element(self, additional: Any, /, *additionals: Any) -> CausalChain:
        """Creates a new chain with the given causes added at the end.

        A single cause goes through `ChainBuilder.append` and is dropped if
        it is the very object already at the end. With several causes,
        all of them are concatenated as they are.

        Args:
            additional (Any): The cause to add.
            *additionals (Any): Further causes to add after it.

        Returns:
            CausalChain: The new chain. This chain is left unchanged.
        """
        _require(additional, "Cause")
        builder = self.builder().from_chain(self)
        if not additionals:
            return builder.append(additional).build()
        return builder.append_all((additional, *additionals)).build()

    def with_elements(self, iterable: Iterable[Any], /) -> CausalChain:
        """Creates a new chain with every cause of `iterable` appended.

        Each cause goes through `ChainBuilder.append`. A `CausalChain`
        argument is merged with `merge` instead.
        """
        _require(iterable, "Causes")
        if isinstance(iterable, CausalChain):
            return self.merge(iterable)
        builder = self.builder().from_chain(self)
        for item in iterable:
            builder.append(item)
        return builder.build()

    def merge(self, other: CausalChain, /) -> CausalChain:
        """Creates a new chain of this chain's causes followed by `other`'s."""
        return self.builder().from_chain(self).from_chain(other).build()

    def __add__(self, other: Any) -> CausalChain:
        if not isinstance(other, CausalChain):
            return NotImplemented
        return self.merge(other)

    # ------------------------------------------------------------------
    # python protocols
    # ------------------------------------------------------------------

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> Self:
        return self

    def __reduce__(self):
        return (self.__class__, (self._elements,))

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._elements)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._elements)

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    @overload
    def __getitem__(self, key: int) -> Any: ...

    @overload
    def __getitem__(self, key: slice) -> tuple[Any, ...]: ...

    def __getitem__(self, key: int | slice) -> Any:
        if not isinstance(key, (int, slice)):
            key_cls = key.__class__.__name__
            raise TypeError(f"indices must be integers or slices, not {key_cls}")
        return self._elements[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CausalChain):
            return NotImplemented
        return self._elements == other._elements

    def __hash__(self) -> int:
        return hash(tuple(_element_hash(item) for item in self._elements))

    def __str__(self) -> str:
        return "Cause[Stack={" + ", ".join(str(c) for c in self._elements) + "}]"

    def __repr__(self) -> str:
        return f"CausalChain.of({', '.join(repr(c) for c in self._elements)})"


class ChainBuilder:
    """Mutable accumulator that assembles a `CausalChain`.

    The pending sequence is unallocated until the first write. Every write
    rebinds a fresh tuple, so a snapshot taken while another thread
    appends is never torn. Concurrent mutation of one builder is still
    unsupported and must be serialized by the caller.

    `build` copies nothing and moves nothing: the built chain shares the
    current immutable tuple, and the builder may keep going afterwards.
    """

    __slots__ = ("_pending",)

    def __init__(self) -> None:
        self._pending: tuple[Any, ...] | None = None

    def append(self, element: Any, /) -> Self:
        """Appends a cause, unless it is the very object already last.

        Only an identical object (``is``) directly at the end is skipped.
        Equal but distinct objects, and repeats further back, are kept.

        Raises:
            NullArgumentError: If `element` is None or unset.
        """
        _require(element, "Cause")
        pending = self._pending or ()
        if pending and pending[-1] is element:
            return self
        self._pending = (*pending, element)
        return self

    def insert(self, position: int, element: Any, /) -> Self:
        """Inserts a cause at `position`, without the duplicate check.

        Raises:
            NullArgumentError: If `element` is None or unset.
            IndexOutOfRangeError: If `position` is outside ``[0, len(self)]``.
            TypeError: If `position` is not an integer.
        """
        _require(element, "Cause")
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(
                f"position must be an integer, not {type(position).__name__}"
            )
        pending = self._pending or ()
        if not 0 <= position <= len(pending):
            raise IndexOutOfRangeError.from_position(position, len(pending))
        self._pending = (*pending[:position], element, *pending[position:])
        return self

    def append_all(self, elements: Iterable[Any], /) -> Self:
        """Appends every cause of `elements` as is, duplicates included.

        Raises:
            NullArgumentError: If `elements` is None or holds None.
        """
        _require(elements, "Causes")
        additions = _require_elements(tuple(elements), "Causes")
        if self._pending is None:
            self._pending = additions or None
        else:
            self._pending = self._pending + additions
        return self

    def from_chain(self, chain: CausalChain, /) -> Self:
        """Appends every cause of an existing chain as is."""
        _require(chain, "Chain")
        if not isinstance(chain, CausalChain):
            raise TypeError(
                f"Expected a CausalChain, got {type(chain).__name__}"
            )
        self._pending = (self._pending or ()) + chain._elements
        return self

    def build(self) -> CausalChain:
        """Constructs a `CausalChain` from the current pending causes.

        Raises:
            InvalidStateError: If no cause has been added.
        """
        if not self._pending:
            raise InvalidStateError("Cannot create an empty causal chain!")
        return CausalChain._wrap(self._pending)

    def reset(self) -> Self:
        """Discards all pending causes."""
        self._pending = None
        return self

    def snapshot(self) -> tuple[Any, ...]:
        return self._pending or ()

    def __len__(self) -> int:
        return len(self._pending or ())

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"ChainBuilder(pending={list(self.snapshot())!r})"
