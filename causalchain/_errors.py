# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "CausalChainError",
    "NullArgumentError",
    "InvalidStateError",
    "IndexOutOfRangeError",
)


class CausalChainError(Exception):
    default_message: ClassVar[str] = "Causal chain error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__


class NullArgumentError(CausalChainError, ValueError):
    """A required element, collection or type query was None or unset."""

    default_message = "Argument cannot be null"

    @classmethod
    def from_argument(cls, name: str, value: Any = None, **extra: Any):
        details = {"argument": name, "value": repr(value), **extra}
        return cls(f"{name} cannot be null!", details=details)


class InvalidStateError(CausalChainError, RuntimeError):
    """An operation was attempted on an object in the wrong state."""

    default_message = "Invalid state"


class IndexOutOfRangeError(CausalChainError, IndexError):
    """Insertion position outside the valid range."""

    default_message = "Index out of range"

    @classmethod
    def from_position(cls, position: int, size: int):
        return cls(
            f"Position {position} out of range for insertion into {size} element(s)",
            details={"position": position, "size": size},
        )
