# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Occurrence model and its post() delegation."""

from uuid import UUID

import pytest
from pydantic import ValidationError

from causalchain import (
    CausalChain,
    EventManager,
    InvalidStateError,
    NullArgumentError,
    Occurrence,
    Unset,
    get_event_manager,
)


class BlockBreak(Occurrence):
    position: tuple[int, int, int] = (0, 0, 0)


class Player:
    def __init__(self, name: str):
        self.name = name


@pytest.fixture
def player():
    return Player("alex")


class TestConstruction:
    def test_defaults(self, player):
        """id, created_at and metadata are filled in automatically."""
        occ = BlockBreak(causes=CausalChain.of(player))
        assert isinstance(occ.id, UUID)
        assert occ.created_at.tzinfo is not None
        assert occ.metadata == {}

    def test_cause_returns_chain(self, player):
        """cause() returns the attached chain instance."""
        chain = CausalChain.of(player, "pickaxe")
        occ = BlockBreak(causes=chain)
        assert occ.cause() is chain

    def test_bare_cause_coerced(self, player):
        """A single object becomes a one-element chain."""
        occ = BlockBreak(causes=player)
        assert occ.cause() == CausalChain.of(player)

    def test_list_cause_coerced(self, player):
        """A list is copied as is, duplicates included."""
        occ = BlockBreak(causes=[player, player, "tnt"])
        assert occ.cause().all() == (player, player, "tnt")

    def test_tuple_cause_uses_dedup(self, player):
        """A tuple goes through append, collapsing repeated objects."""
        occ = BlockBreak(causes=(player, player, "tnt"))
        assert occ.cause().all() == (player, "tnt")

    def test_missing_causes(self):
        """Omitting causes is a pydantic validation error."""
        with pytest.raises(ValidationError):
            BlockBreak()

    @pytest.mark.parametrize("value", [None, Unset])
    def test_null_causes_raise_null_argument(self, value):
        """A null causes value raises NullArgumentError, not ValidationError."""
        with pytest.raises(NullArgumentError) as exc_info:
            BlockBreak(causes=value)
        assert not isinstance(exc_info.value, ValidationError)

    def test_null_element_raises_null_argument(self, player):
        """A None inside the causes list raises NullArgumentError."""
        with pytest.raises(NullArgumentError):
            BlockBreak(causes=[player, None])

    @pytest.mark.parametrize("value", [[], ()])
    def test_empty_causes_raise_invalid_state(self, value):
        """Empty causes raise InvalidStateError."""
        with pytest.raises(InvalidStateError):
            BlockBreak(causes=value)

    def test_other_fields_still_validated(self, player):
        """Non-chain fields keep pydantic validation."""
        with pytest.raises(ValidationError):
            BlockBreak(causes=player, position="nowhere")

    def test_causes_frozen(self, player):
        """causes cannot be reassigned after construction."""
        occ = BlockBreak(causes=player)
        with pytest.raises(ValidationError):
            occ.causes = CausalChain.of("other")

    def test_extra_fields_forbidden(self, player):
        """Unknown fields are rejected."""
        with pytest.raises(ValidationError):
            BlockBreak(causes=player, unknown=1)

    def test_hash_by_id(self, player):
        """Occurrences hash by their id."""
        occ = BlockBreak(causes=player)
        assert hash(occ) == hash(occ.id)
        assert {occ: 1}[occ] == 1


class TestPost:
    def test_post_returns_self(self, player):
        """post() returns the occurrence for chaining."""
        occ = BlockBreak(causes=player)
        assert occ.post() is occ

    def test_post_uses_global_manager(self, player):
        """Without an argument, post() targets the process-wide manager."""
        received = []

        def handler(event):
            received.append(event)

        get_event_manager().subscribe(BlockBreak, handler)
        occ = BlockBreak(causes=player).post()
        assert received == [occ]

    def test_post_to_explicit_manager(self, player):
        """post(manager) delivers only to the given manager."""
        manager = EventManager()
        received = []

        def handler(event):
            received.append(event.cause().root())

        manager.subscribe(Occurrence, handler)
        BlockBreak(causes=player).post(manager)
        assert received == [player]
        assert get_event_manager().subscriber_count() == 0
