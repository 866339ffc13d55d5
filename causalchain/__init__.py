# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import logging

from ._errors import (
    CausalChainError,
    IndexOutOfRangeError,
    InvalidStateError,
    NullArgumentError,
)
from .cause import CausalChain, ChainBuilder, TypeQuery
from .config import settings
from .dispatch import EventManager, get_event_manager, set_event_manager
from .occurrence import Occurrence
from .sentinel import Unset
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(settings.LOG_LEVEL)


__all__ = (
    "__version__",
    "CausalChain",
    "CausalChainError",
    "ChainBuilder",
    "EventManager",
    "IndexOutOfRangeError",
    "InvalidStateError",
    "NullArgumentError",
    "Occurrence",
    "TypeQuery",
    "Unset",
    "get_event_manager",
    "logger",
    "set_event_manager",
    "settings",
)
