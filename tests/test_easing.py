"""Tests for easing families and easing name parsing."""

from __future__ import annotations

import pytest
from easing_functions import BounceEaseOut, ElasticEaseIn

from animstate.easing import FAMILIES, Bounce, Cubic, Elastic, Quadratic, easing_name, linear, parse_easing


class TestFamilies:
    """Tests for the built-in easing curves."""

    @pytest.mark.parametrize("family", list(FAMILIES.values()), ids=lambda f: f.name)
    def test_curves_start_at_zero_and_end_at_one(self, family) -> None:
        """Every curve maps 0 to 0 and 1 to 1."""
        for fn in (family.ease_in, family.ease_out, family.ease_in_out):
            assert fn(0.0) == pytest.approx(0.0, abs=1e-9)
            assert fn(1.0) == pytest.approx(1.0, abs=1e-9)

    def test_in_out_is_symmetric_at_midpoint(self) -> None:
        """In-out curves pass through 0.5 halfway."""
        assert Quadratic.ease_in_out(0.5) == pytest.approx(0.5)
        assert Cubic.ease_in_out(0.5) == pytest.approx(0.5)

    def test_ease_in_starts_slow(self) -> None:
        """Ease-in lags linear progress early on."""
        assert Cubic.ease_in(0.25) < 0.25
        assert Cubic.ease_out(0.25) > 0.25

    def test_curves_follow_easing_functions(self) -> None:
        """Families evaluate the easing-functions curves over [0, 1]."""
        for k in (0.1, 0.35, 0.8):
            assert Bounce.ease_out(k) == pytest.approx(BounceEaseOut().ease(k))
            assert Elastic.ease_in(k) == pytest.approx(ElasticEaseIn().ease(k))


class TestParseEasing:
    """Tests for parse_easing / easing_name."""

    def test_family_and_variant(self) -> None:
        """'family.variant' selects a specific curve."""
        assert parse_easing("cubic.in") is Cubic.ease_in
        assert parse_easing("Cubic.Out") is Cubic.ease_out
        assert parse_easing("quadratic.in_out") is Quadratic.ease_in_out

    def test_bare_family_uses_in_out(self) -> None:
        """A family name alone means its in-out curve."""
        assert parse_easing("cubic") is Cubic.ease_in_out

    def test_unknown_falls_back_to_linear(self) -> None:
        """Unknown names and empty values give linear."""
        assert parse_easing("wobbly") is linear
        assert parse_easing("") is linear
        assert parse_easing(None) is linear

    def test_name_round_trip(self) -> None:
        """easing_name reverses parse_easing for built-in curves."""
        assert easing_name(parse_easing("cubic.out")) == "cubic.out"
        assert easing_name(linear) == "linear"
        assert easing_name(lambda k: k) == ""
