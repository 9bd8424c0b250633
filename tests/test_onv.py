"""Tests for occupation number vectors."""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fockspace.onv import ONV, onv_from_bitstring
from utils.errors import InvalidConfigurationError


class TestONVConstruction:
    """Test cases for ONV construction and occupation indices."""

    def test_occupation_indices(self):
        """Test extraction of the occupied orbitals, lowest first."""
        onv = ONV(6, 3, 0b101010)
        np.testing.assert_array_equal(onv.occupation_indices, [1, 3, 5])
        assert onv.get_occupation_index(0) == 1
        assert onv.get_occupation_index(2) == 5

    def test_wrong_electron_count(self):
        """Test that a representation with the wrong popcount is rejected."""
        with pytest.raises(InvalidConfigurationError):
            ONV(4, 2, 0b0111)

    def test_representation_too_large(self):
        """Test that bits above orbital K-1 are rejected."""
        with pytest.raises(InvalidConfigurationError):
            ONV(3, 1, 0b1000)

    def test_too_many_electrons(self):
        """Test that N > K is rejected."""
        with pytest.raises(InvalidConfigurationError):
            ONV(2, 3, 0b11)

    def test_bitstring(self):
        """Test reverse lexical bitstrings: orbital 0 is rightmost."""
        onv = ONV(4, 3, 0b0111)
        assert onv.to_bitstring() == "0111"
        assert str(onv) == "0111"
        assert onv_from_bitstring("0111") == (4, 3, 7)

    def test_invalid_bitstring(self):
        """Test that non-binary strings are rejected."""
        with pytest.raises(InvalidConfigurationError):
            onv_from_bitstring("01a1")

    def test_equality(self):
        """Test equality and hashing on the representation."""
        a = ONV(4, 2, 0b0101)
        b = ONV(4, 2, 0b0101)
        c = ONV(4, 2, 0b0110)
        assert a == b
        assert a != c
        assert len({a, b, c}) == 2


class TestONVOperators:
    """Test cases for creation and annihilation operators."""

    def test_annihilate(self):
        """Test annihilation of an occupied and an empty orbital."""
        onv = ONV(4, 2, 0b0101)
        assert onv.annihilate(2)
        assert onv.representation == 0b0001

        # Orbital 1 is empty: nothing changes
        assert not onv.annihilate(1)
        assert onv.representation == 0b0001

    def test_create(self):
        """Test creation on an empty and an occupied orbital."""
        onv = ONV(4, 2, 0b0101)
        assert not onv.create(0)
        assert onv.representation == 0b0101

        assert onv.create(1)
        assert onv.representation == 0b0111

    def test_signed_operators(self):
        """Test the phase factor: one sign flip per occupied orbital below p."""
        onv = ONV(5, 3, 0b10101)

        success, sign = onv.annihilate(4, 1)
        assert success
        assert sign == 1  # orbitals 0 and 2 below

        success, sign = onv.create(3, sign)
        assert success
        assert sign == 1  # orbitals 0 and 2 below

        success, sign = onv.annihilate(2, sign)
        assert success
        assert sign == -1  # orbital 0 below

    def test_failed_signed_operator_keeps_sign(self):
        """Test that a failed signed operator leaves the sign untouched."""
        onv = ONV(3, 1, 0b001)
        success, sign = onv.annihilate(2, -1)
        assert not success
        assert sign == -1

    def test_update_occupation_indices(self):
        """Test that operators do not refresh the indices until asked."""
        onv = ONV(4, 2, 0b0011)
        onv.annihilate(0)
        onv.create(3)
        np.testing.assert_array_equal(onv.occupation_indices, [0, 1])

        onv.update_occupation_indices()
        np.testing.assert_array_equal(onv.occupation_indices, [1, 3])

    def test_slice(self):
        """Test slicing of orbital ranges."""
        onv = ONV(6, 3, 0b010011)
        assert onv.slice(1, 4) == 0b001
        assert onv.slice(0, 6) == 0b010011

        with pytest.raises(InvalidConfigurationError):
            onv.slice(3, 3)
        with pytest.raises(InvalidConfigurationError):
            onv.slice(2, 7)

    def test_count_occupied_below(self):
        """Test counting of occupied orbitals below an index."""
        onv = ONV(6, 3, 0b101010)
        assert onv.count_occupied_below(0) == 0
        assert onv.count_occupied_below(4) == 2
        assert onv.operator_phase_factor(4) == 1
        assert onv.operator_phase_factor(3) == -1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
