"""
Unit tests for the needs model.
"""

import random

import pytest

from zibu.needs import (
    DEFAULT_NEEDS,
    NeedChannel,
    NeedsState,
    apply_decay,
    clamp_need,
    decay_per_ms,
    increment,
)

RATE = decay_per_ms(0.01, 300_000)


class TestClamp:
    """Tests for clamp_need."""

    def test_inside_range(self):
        assert clamp_need(0.42) == 0.42

    def test_below_zero(self):
        assert clamp_need(-0.3) == 0.0

    def test_above_one(self):
        assert clamp_need(1.7) == 1.0

    def test_bounds(self):
        assert clamp_need(0.0) == 0.0
        assert clamp_need(1.0) == 1.0


class TestNeedsState:
    """Tests for the NeedsState value type."""

    def test_default_vector(self):
        """First-run defaults are partially depleted, not full."""
        assert DEFAULT_NEEDS.mood == 0.5
        assert DEFAULT_NEEDS.hunger == 0.04
        assert DEFAULT_NEEDS.clean == 0.5
        assert DEFAULT_NEEDS.rest == 0.1

    def test_construction_clamps(self):
        state = NeedsState(mood=2.0, hunger=-1.0, clean=0.3, rest=1.0)
        assert state.mood == 1.0
        assert state.hunger == 0.0
        assert state.clean == 0.3

    def test_total_over_channels(self):
        state = NeedsState()
        assert set(state.to_dict()) == {"mood", "hunger", "clean", "rest"}
        assert [channel for channel, _ in state.items()] == list(NeedChannel)

    def test_get_by_channel(self):
        state = NeedsState(mood=0.9)
        assert state.get(NeedChannel.MOOD) == 0.9

    def test_immutable(self):
        state = NeedsState()
        with pytest.raises(AttributeError):
            state.mood = 0.2  # type: ignore[misc]

    def test_from_dict_requires_every_channel(self):
        with pytest.raises(ValueError, match="rest"):
            NeedsState.from_dict({"mood": 0.5, "hunger": 0.5, "clean": 0.5})

    def test_from_dict_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            NeedsState.from_dict({"mood": "high", "hunger": 0.5, "clean": 0.5, "rest": 0.5})

    def test_from_dict_rejects_booleans(self):
        with pytest.raises(ValueError):
            NeedsState.from_dict({"mood": True, "hunger": 0.5, "clean": 0.5, "rest": 0.5})

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), 10**400])
    def test_from_dict_rejects_non_finite(self, bad):
        """A NaN would otherwise clamp to a full channel."""
        with pytest.raises(ValueError):
            NeedsState.from_dict({"mood": bad, "hunger": 0.5, "clean": 0.5, "rest": 0.5})

    def test_from_dict_clamps(self):
        state = NeedsState.from_dict({"mood": 3, "hunger": -2, "clean": 0.5, "rest": 0.5})
        assert state.mood == 1.0
        assert state.hunger == 0.0

    def test_lowest_and_any_below(self):
        state = NeedsState(mood=0.5, hunger=0.04, clean=0.5, rest=0.1)
        assert state.lowest() == (NeedChannel.HUNGER, 0.04)
        assert state.any_below(0.1)
        assert not state.any_below(0.04)


class TestDecay:
    """Tests for apply_decay and decay_per_ms."""

    def test_rate_conversion(self):
        assert decay_per_ms(0.01, 300_000) == pytest.approx(0.01 / 300_000)

    def test_rate_requires_positive_interval(self):
        with pytest.raises(ValueError):
            decay_per_ms(0.01, 0)

    def test_one_tick(self):
        state = apply_decay(NeedsState.full(), RATE, 300_000)
        for _, value in state.items():
            assert value == pytest.approx(0.99)

    def test_partial_tick_is_proportional(self):
        """Decay is rate based, so half a tick costs half a step."""
        state = apply_decay(NeedsState.full(), RATE, 150_000)
        assert state.mood == pytest.approx(0.995)

    def test_clamps_at_zero(self):
        state = apply_decay(NeedsState(), RATE, 300_000 * 1000)
        assert all(value == 0.0 for _, value in state.items())

    def test_zero_or_negative_elapsed_is_noop(self):
        state = NeedsState(mood=0.7)
        assert apply_decay(state, RATE, 0) is state
        assert apply_decay(state, RATE, -5000) is state

    def test_pure(self):
        state = NeedsState()
        apply_decay(state, RATE, 600_000)
        assert state == NeedsState()

    def test_decay_composes_over_time(self):
        """Decaying t1 then t2 equals decaying t1 + t2."""
        rng = random.Random(7)
        for _ in range(50):
            state = NeedsState(
                mood=rng.random(), hunger=rng.random(), clean=rng.random(), rest=rng.random()
            )
            t1 = rng.uniform(0, 5_000_000)
            t2 = rng.uniform(0, 5_000_000)
            once = apply_decay(state, RATE, t1 + t2)
            twice = apply_decay(apply_decay(state, RATE, t1), RATE, t2)
            for channel in NeedChannel:
                assert once.get(channel) == pytest.approx(twice.get(channel), abs=1e-12)

    def test_offline_scenario_45_minutes(self):
        """45 minutes away = 9 ticks = -0.09 on every channel."""
        state = apply_decay(NeedsState(), RATE, 2_700_000)
        assert state.mood == pytest.approx(0.41)
        assert state.hunger == 0.0
        assert state.clean == pytest.approx(0.41)
        assert state.rest == pytest.approx(0.01)


class TestIncrement:
    """Tests for increment."""

    def test_single_channel(self):
        state = increment(NeedsState(), NeedChannel.HUNGER, 0.01)
        assert state.hunger == pytest.approx(0.05)
        assert state.mood == 0.5
        assert state.clean == 0.5
        assert state.rest == 0.1

    def test_caps_at_one(self):
        state = increment(NeedsState(rest=0.995), NeedChannel.REST, 0.01)
        assert state.rest == 1.0

    def test_clamp_invariant_over_random_sequences(self):
        rng = random.Random(11)
        state = NeedsState()
        for _ in range(2000):
            if rng.random() < 0.5:
                state = increment(state, rng.choice(list(NeedChannel)), rng.uniform(-0.5, 0.5))
            else:
                state = apply_decay(state, RATE, rng.uniform(0, 10_000_000))
            for _, value in state.items():
                assert 0.0 <= value <= 1.0
