"""
Tests for tools, activities, shake detection and the interaction controller.
"""

import pytest

from zibu.config import SimulationConfig
from zibu.interaction import (
    IDLE,
    Cleaning,
    Feeding,
    Idle,
    InteractionController,
    Playing,
    ShakeDetector,
    Sleeping,
    ToolCategory,
    get_tool,
    is_feeding,
    is_sleeping,
    tools_for,
)
from zibu.messages import AccelSample
from zibu.needs import NeedChannel

SHAKE = AccelSample(x=2.5, y=0.0, z=-1.0)
REST = AccelSample(x=0.0, y=0.0, z=-1.0)


class TestTools:
    """Tests for the tool catalog."""

    def test_catalog(self):
        assert get_tool("bottle").category == ToolCategory.FEED
        assert get_tool("sponge").category == ToolCategory.CLEAN
        assert get_tool("ball").category == ToolCategory.PLAY
        assert get_tool("blanket").category == ToolCategory.SLEEP

    def test_unknown_tool(self):
        with pytest.raises(ValueError, match="Unknown tool"):
            get_tool("chainsaw")

    def test_tools_for_category(self):
        assert [t.key for t in tools_for(ToolCategory.SLEEP)] == ["blanket"]

    def test_every_tool_has_instructions(self):
        for category in ToolCategory:
            for tool in tools_for(category):
                assert tool.instructions


class TestShakeDetector:
    """Tests for the rate-limited shake trigger."""

    def test_below_threshold_ignored(self, clock):
        detector = ShakeDetector(threshold=2.0, refractory_ms=500, clock=clock)
        assert detector.process(1.9) is False
        assert detector.process(2.0) is False

    def test_refractory_window(self, clock):
        """Two shakes less than 500ms apart count once."""
        detector = ShakeDetector(threshold=2.0, refractory_ms=500, clock=clock)
        assert detector.process(3.0) is True
        clock.advance(499)
        assert detector.process(3.0) is False
        clock.advance(1)
        assert detector.process(3.0) is True
        assert detector.accepted_count == 2
        assert detector.suppressed_count == 1

    def test_suppressed_sample_does_not_extend_window(self, clock):
        detector = ShakeDetector(threshold=2.0, refractory_ms=500, clock=clock)
        detector.process(3.0)
        clock.advance(300)
        detector.process(3.0)
        clock.advance(200)
        assert detector.process(3.0) is True

    def test_reset(self, clock):
        detector = ShakeDetector(clock=clock)
        detector.process(3.0)
        detector.reset()
        assert detector.process(3.0) is True


class TestInteractionController:
    """Tests for the activity state machine."""

    @pytest.fixture
    def increments(self):
        return []

    @pytest.fixture
    def changes(self):
        return []

    @pytest.fixture
    def controller(self, increments, changes, scheduler, clock):
        return InteractionController(
            on_increment=lambda channel, amount: increments.append((channel, amount)),
            config=SimulationConfig(),
            timer_factory=scheduler.factory,
            clock=clock,
            on_activity_change=lambda prev, cur: changes.append((prev, cur)),
        )

    def test_starts_idle(self, controller):
        assert controller.activity == IDLE
        for category in ToolCategory:
            assert controller.selection(category) is None

    @pytest.mark.parametrize("key", ["bottle", "sponge", "ball", "blanket"])
    def test_tool_exclusivity(self, controller, key):
        """After any selection every other category reports nothing selected."""
        for other in ("bottle", "sponge", "ball", "blanket"):
            controller.select_tool(other)
        controller.select_tool(key)

        selected = get_tool(key)
        for category in ToolCategory:
            expected = selected if category == selected.category else None
            assert controller.selection(category) == expected

    def test_unknown_tool_raises_and_keeps_state(self, controller):
        controller.select_tool("sponge")
        with pytest.raises(ValueError):
            controller.select_tool("rocket")
        assert isinstance(controller.activity, Cleaning)

    def test_blanket_sleeps(self, controller, scheduler):
        controller.select_tool("blanket")
        assert is_sleeping(controller.activity)
        assert scheduler.get("sleep_rest").is_running

    def test_non_sleep_tool_wakes(self, controller, scheduler):
        controller.select_tool("blanket")
        controller.select_tool("ball")
        assert not is_sleeping(controller.activity)
        assert not scheduler.get("sleep_rest").is_running

    def test_reselecting_same_tool_is_noop(self, controller, changes):
        controller.select_tool("bottle")
        controller.press_start()
        changes.clear()

        controller.select_tool("bottle")

        assert changes == []
        assert is_feeding(controller.activity)

    def test_open_picker_clears_other_category(self, controller):
        controller.select_tool("blanket")
        controller.open_picker(ToolCategory.FEED)
        assert controller.activity == IDLE

    def test_open_picker_keeps_same_category(self, controller):
        controller.select_tool("blanket")
        controller.open_picker(ToolCategory.SLEEP)
        assert isinstance(controller.activity, Sleeping)

    def test_clear_selection_wakes(self, controller, scheduler):
        controller.select_tool("blanket")
        controller.clear_selection()
        assert isinstance(controller.activity, Idle)
        assert scheduler.running() == []

    def test_activity_change_callback(self, controller, changes):
        controller.select_tool("sponge")
        assert len(changes) == 1
        previous, current = changes[0]
        assert previous == IDLE
        assert isinstance(current, Cleaning)

    # Feeding

    def test_press_without_feed_tool_ignored(self, controller, scheduler):
        controller.select_tool("sponge")
        assert controller.press_start() is False
        assert not scheduler.get("feed_hunger").is_running

    def test_hold_to_feed(self, controller, scheduler, increments):
        controller.select_tool("bottle")
        assert controller.press_start() is True
        assert is_feeding(controller.activity)

        scheduler.advance(3000)
        controller.press_end()
        scheduler.advance(5000)

        assert increments == [(NeedChannel.HUNGER, 0.01)] * 3
        assert not is_feeding(controller.activity)
        assert isinstance(controller.activity, Feeding)

    def test_switching_tool_while_feeding_stops_feed_loop(self, controller, scheduler, increments):
        controller.select_tool("bottle")
        controller.press_start()
        scheduler.advance(1000)
        controller.select_tool("sponge")
        scheduler.advance(10_000)

        assert increments == [(NeedChannel.HUNGER, 0.01)]
        assert not scheduler.get("feed_hunger").is_running

    def test_press_end_without_press(self, controller):
        controller.select_tool("bottle")
        assert controller.press_end() is False

    # Cleaning

    def test_swipe_to_wash(self, controller, increments):
        controller.select_tool("sponge")
        assert controller.drag_release(25) is True
        assert controller.drag_release(-40) is True
        assert increments == [(NeedChannel.CLEAN, 0.01)] * 2

    def test_short_swipe_ignored(self, controller, increments):
        controller.select_tool("sponge")
        assert controller.drag_release(20) is False
        assert controller.drag_release(5) is False
        assert increments == []

    def test_swipe_without_sponge_ignored(self, controller, increments):
        controller.select_tool("ball")
        assert controller.drag_release(100) is False
        assert increments == []

    # Playing

    def test_shake_to_play(self, controller, clock, increments):
        controller.select_tool("ball")
        assert controller.handle_accel_sample(SHAKE) is True
        clock.advance(100)
        assert controller.handle_accel_sample(SHAKE) is False
        clock.advance(400)
        assert controller.handle_accel_sample(SHAKE) is True
        assert controller.handle_accel_sample(REST) is False
        assert increments == [(NeedChannel.MOOD, 0.01)] * 2

    def test_shake_without_ball_ignored(self, controller, increments):
        controller.select_tool("bottle")
        assert controller.handle_accel_sample(SHAKE) is False
        assert increments == []

    def test_shake_window_resets_when_play_restarts(self, controller, clock, increments):
        controller.select_tool("ball")
        controller.handle_accel_sample(SHAKE)
        controller.select_tool("sponge")
        controller.select_tool("ball")
        clock.advance(10)
        assert controller.handle_accel_sample(SHAKE) is True

    # Sleeping

    def test_sleep_restores_rest(self, controller, scheduler, increments):
        controller.select_tool("blanket")
        scheduler.advance(10_000)
        assert increments == [(NeedChannel.REST, 0.01)] * 10

    # Pause / resume

    def test_pause_stops_timers_and_releases_press(self, controller, scheduler, increments):
        controller.select_tool("bottle")
        controller.press_start()
        controller.pause()
        scheduler.advance(5000)

        assert increments == []
        assert not is_feeding(controller.activity)
        assert isinstance(controller.activity, Feeding)

    def test_pause_ignores_shakes(self, controller, increments):
        controller.select_tool("ball")
        controller.pause()
        assert controller.handle_accel_sample(SHAKE) is False

    def test_pause_ignores_presses(self, controller, scheduler):
        controller.select_tool("bottle")
        controller.pause()
        assert controller.press_start() is False
        assert not is_feeding(controller.activity)
        assert not scheduler.get("feed_hunger").is_running

    def test_pause_ignores_swipes(self, controller, increments):
        controller.select_tool("sponge")
        controller.pause()
        assert controller.drag_release(100) is False
        assert increments == []

        controller.resume()
        assert controller.drag_release(100) is True

    def test_resume_restarts_sleep(self, controller, scheduler, increments):
        controller.select_tool("blanket")
        controller.pause()
        scheduler.advance(5000)
        controller.resume()
        scheduler.advance(2000)
        assert increments == [(NeedChannel.REST, 0.01)] * 2

    def test_shutdown(self, controller, scheduler):
        controller.select_tool("blanket")
        controller.shutdown()
        assert controller.activity == IDLE
        assert scheduler.running() == []

    def test_get_state(self, controller):
        controller.select_tool("ball")
        state = controller.get_state()
        assert state["activity"] == "Playing"
        assert state["tool"] == "ball"
        assert state["rest_timer"] is False

    def test_activities_are_plain_values(self):
        assert Playing(get_tool("ball")) == Playing(get_tool("ball"))
        assert Feeding(get_tool("bottle")) != Feeding(get_tool("bottle"), pressing=True)
