# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import pytest

from causalchain.dispatch import set_event_manager


@pytest.fixture(autouse=True)
def fresh_event_manager():
    """Each test starts from a lazily created process-wide manager."""
    set_event_manager(None)
    yield
    set_event_manager(None)
