# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Test the singleton sentinel infrastructure."""

import copy
import pickle

from causalchain.sentinel import Unset, UnsetType, is_null, is_sentinel


class TestUnset:
    def test_singleton_identity(self):
        """Unset is a single instance."""
        assert UnsetType() is UnsetType() is Unset

    def test_copy_preserves_identity(self):
        """copy and deepcopy return Unset itself."""
        assert copy.copy(Unset) is Unset
        assert copy.deepcopy(Unset) is Unset

    def test_pickle_preserves_identity(self):
        """Pickling returns Unset itself."""
        assert pickle.loads(pickle.dumps(Unset)) is Unset

    def test_falsy_and_repr(self):
        """Unset is falsy and reprs as Unset."""
        assert not Unset
        assert repr(Unset) == "Unset"


class TestPredicates:
    def test_is_sentinel(self):
        """is_sentinel is true only for sentinels."""
        assert is_sentinel(Unset)
        assert not is_sentinel(None)
        assert not is_sentinel(0)

    def test_is_null(self):
        """is_null is true for None and sentinels."""
        assert is_null(None)
        assert is_null(Unset)
        assert not is_null(0)
        assert not is_null("")
        assert not is_null(False)
