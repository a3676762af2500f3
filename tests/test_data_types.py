"""
Tests for core data types: RGBA and the rounding helpers.
"""

import numpy as np
import pytest

from pixelforge.core.data_types import RGBA, clamp, round_half_away, to_channel


class TestRounding:
    """Tests for round-half-away-from-zero."""

    def test_ties_round_up_for_positive(self):
        """Test that .5 always rounds away from zero."""
        assert round_half_away(127.5) == 128
        assert round_half_away(126.5) == 127
        assert round_half_away(0.5) == 1

    def test_ties_round_down_for_negative(self):
        """Test symmetric behavior below zero."""
        assert round_half_away(-0.5) == -1
        assert round_half_away(-2.5) == -3

    def test_non_ties(self):
        """Test ordinary nearest-integer rounding."""
        assert round_half_away(1.49) == 1
        assert round_half_away(1.51) == 2
        assert round_half_away(200.0) == 200

    def test_to_channel_clamps(self):
        """Test channel conversion clamps into [0, 255]."""
        assert to_channel(-10) == 0
        assert to_channel(300) == 255
        assert to_channel(254.5) == 255

    def test_clamp(self):
        assert clamp(2.0, 0.0, 1.0) == 1.0
        assert clamp(-1.0, 0.0, 1.0) == 0.0
        assert clamp(0.25, 0.0, 1.0) == 0.25


class TestRGBA:
    """Tests for the RGBA value type."""

    def test_creation(self):
        """Test creating a color."""
        color = RGBA(10, 20, 30, 0.5)

        assert color.r == 10
        assert color.g == 20
        assert color.b == 30
        assert color.a == 0.5

    def test_defaults_to_opaque_black(self):
        """Test the default color is opaque black."""
        assert RGBA() == RGBA(0, 0, 0, 1.0)
        assert RGBA.black() == RGBA(0, 0, 0, 1.0)

    def test_immutable(self):
        """Test that colors cannot be modified."""
        color = RGBA(1, 2, 3)
        with pytest.raises(AttributeError):
            color.r = 5

    def test_channel_out_of_range_rejected(self):
        """Test that invalid channels are rejected."""
        with pytest.raises(ValueError):
            RGBA(256, 0, 0)
        with pytest.raises(ValueError):
            RGBA(0, -1, 0)

    def test_alpha_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            RGBA(0, 0, 0, 1.5)

    def test_non_integer_channel_rejected(self):
        """Test that float channels must go through from_floats."""
        with pytest.raises(TypeError):
            RGBA(1.5, 0, 0)

    def test_from_floats_rounds_and_clamps(self):
        """Test lenient construction."""
        color = RGBA.from_floats(127.5, 300, -4, 2.0)

        assert color == RGBA(128, 255, 0, 1.0)

    def test_to_bytes(self):
        """Test packing to four bytes with alpha scaled to 255."""
        assert RGBA(1, 2, 3, 1.0).to_bytes() == bytes([1, 2, 3, 255])
        assert RGBA(1, 2, 3, 0.0).to_bytes() == bytes([1, 2, 3, 0])
        # 0.5 * 255 = 127.5 rounds away from zero
        assert RGBA(1, 2, 3, 0.5).to_bytes() == bytes([1, 2, 3, 128])

    def test_to_array(self):
        arr = RGBA(9, 8, 7, 1.0).to_array()

        assert arr.dtype == np.uint8
        np.testing.assert_array_equal(arr, [9, 8, 7, 255])

    def test_to_normalized(self):
        r, g, b, a = RGBA(255, 0, 51, 0.25).to_normalized()

        assert r == 1.0
        assert g == 0.0
        assert b == pytest.approx(0.2)
        assert a == 0.25

    def test_lerp_endpoints_exact(self):
        """Test t=0 and t=1 return the endpoints exactly."""
        a = RGBA(10, 20, 30, 0.3)
        b = RGBA(200, 100, 0, 0.9)

        assert a.lerp(b, 0.0) == a
        assert a.lerp(b, 1.0) == b

    def test_lerp_midpoint(self):
        """Test the documented midpoint of black and white."""
        black = RGBA(0, 0, 0, 1.0)
        white = RGBA(255, 255, 255, 1.0)

        assert black.lerp(white, 0.5) == RGBA(128, 128, 128, 1.0)

    def test_lerp_alpha_is_float(self):
        mixed = RGBA(0, 0, 0, 0.0).lerp(RGBA(0, 0, 0, 1.0), 0.25)

        assert mixed.a == pytest.approx(0.25)

    def test_lerp_clamps_factor(self):
        a = RGBA(10, 10, 10)
        b = RGBA(20, 20, 20)

        assert a.lerp(b, -3.0) == a
        assert a.lerp(b, 7.0) == b

    def test_iteration(self):
        assert tuple(RGBA(1, 2, 3, 0.5)) == (1, 2, 3, 0.5)
