# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Self

from .cause import CausalChain

if TYPE_CHECKING:
    from .dispatch import EventManager

__all__ = ("Occurrence",)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _to_chain(value: Any) -> CausalChain:
    """Coerces a bare cause, or a list/tuple of causes, into a chain."""
    if isinstance(value, CausalChain):
        return value
    if isinstance(value, (list, tuple)):
        return CausalChain.from_iterable(value)
    return CausalChain.of(value)


class Occurrence(BaseModel):
    """A notable happening that carries the causal chain behind it.

    Subclass it to define concrete occurrences; subscribers registered on
    an `EventManager` receive every posted instance of their type.

    Example::

        class BlockBreak(Occurrence):
            position: tuple[int, int, int]

        BlockBreak(causes=CausalChain.of(player, pickaxe), position=(0, 64, 0)).post()
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="forbid",
        use_attribute_docstrings=True,
        validate_assignment=True,
    )

    id: UUID = Field(default_factory=uuid4, frozen=True)
    """A unique identifier for the occurrence."""

    created_at: datetime = Field(default_factory=_now_utc, frozen=True)
    """When the occurrence was created."""

    causes: CausalChain = Field(frozen=True)
    """The root-to-effect chain of causes. Never empty."""

    metadata: dict = Field(default_factory=dict)
    """Additional data for this occurrence."""

    def __init__(self, **data: Any) -> None:
        # chain errors propagate as-is, never wrapped in ValidationError
        if "causes" in data:
            data["causes"] = _to_chain(data["causes"])
        super().__init__(**data)

    @field_validator("causes", mode="before")
    def _validate_causes(cls, value: Any) -> CausalChain:
        return _to_chain(value)

    def cause(self) -> CausalChain:
        """Gets the causal chain of this occurrence."""
        return self.causes

    def post(self, manager: EventManager | None = None) -> Self:
        """Hands this occurrence to an event manager, then returns it.

        Args:
            manager (EventManager | None): Target manager. Defaults to the
                process-wide one from `get_event_manager`.

        Returns:
            This occurrence, for chaining at the producer site.
        """
        if manager is None:
            from .dispatch import get_event_manager

            manager = get_event_manager()
        manager.post(self)
        return self

    def __bool__(self) -> bool:
        return True

    def __hash__(self) -> int:
        return hash(self.id)
