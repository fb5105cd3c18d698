"""Tests for the instance-scoped notification hub."""

import unittest
from unittest.mock import MagicMock

from chassis.events import Events


class EventsTest(unittest.TestCase):
    """Tests for subscribe/publish behaviour."""

    def setUp(self):
        self.hub = Events()
        self.calls = []

    def test_dispatches_in_registration_order(self):
        """Test dispatches in registration order."""
        self.hub.on("change", lambda *p: self.calls.append(("first", p)))
        self.hub.on("change", lambda *p: self.calls.append(("second", p)))

        self.hub.trigger("change", 1, 2)

        self.assertEqual(self.calls, [("first", (1, 2)), ("second", (1, 2))])

    def test_same_handler_registered_twice_runs_twice(self):
        """Test same handler registered twice runs twice."""
        handler = MagicMock()
        self.hub.on("change", handler)
        self.hub.on("change", handler)

        self.hub.trigger("change")

        self.assertEqual(handler.call_count, 2)

    def test_space_separated_channels(self):
        """Test space separated channels."""
        handler = MagicMock()
        self.hub.on("change error", handler)

        self.hub.trigger("error", "boom")
        self.hub.trigger("change")

        self.assertEqual(handler.call_count, 2)
        handler.assert_any_call("boom")

    def test_all_channel_receives_name_first(self):
        """Test all channel receives name first."""
        self.hub.on("all", lambda *p: self.calls.append(p))

        self.hub.trigger("change", "payload")

        self.assertEqual(self.calls, [("change", "payload")])

    def test_once_delivers_a_single_time(self):
        """Test once delivers a single time."""
        handler = MagicMock()
        self.hub.once("change", handler)

        self.hub.trigger("change")
        self.hub.trigger("change")

        handler.assert_called_once_with()
        self.assertEqual(self.hub.listeners("change"), [])

    def test_off_with_handler_removes_only_that_handler(self):
        """Test off with handler removes only that handler."""
        keep, drop = MagicMock(), MagicMock()
        self.hub.on("change", keep)
        self.hub.on("change", drop)

        self.hub.off("change", drop)
        self.hub.trigger("change")

        keep.assert_called_once_with()
        drop.assert_not_called()

    def test_off_channel_and_off_everything(self):
        """Test off channel and off everything."""
        handler = MagicMock()
        self.hub.on("change", handler)
        self.hub.on("error", handler)

        self.hub.off("change")
        self.hub.trigger("change")
        handler.assert_not_called()

        self.hub.off()
        self.hub.trigger("error")
        handler.assert_not_called()

    def test_off_by_handler_across_channels(self):
        """Test off by handler across channels."""
        handler = MagicMock()
        self.hub.on("change error", handler)

        self.hub.off(handler=handler)
        self.hub.trigger("change error")

        handler.assert_not_called()

    def test_hubs_do_not_share_listeners(self):
        """Test hubs do not share listeners."""
        other = Events()
        handler = MagicMock()
        self.hub.on("change", handler)

        other.trigger("change")

        handler.assert_not_called()

    def test_handler_removed_during_dispatch_still_sees_current_event(self):
        """Test handler removed during dispatch still sees current event."""
        second = MagicMock()

        def first():
            self.hub.off("change", second)

        self.hub.on("change", first)
        self.hub.on("change", second)

        self.hub.trigger("change")
        self.hub.trigger("change")

        second.assert_called_once_with()

    def test_handler_errors_propagate(self):
        """Test handler errors propagate."""
        self.hub.on("change", MagicMock(side_effect=RuntimeError("listener bug")))

        with self.assertRaises(RuntimeError):
            self.hub.trigger("change")

    def test_trigger_without_listeners_is_harmless(self):
        """Test trigger without listeners is harmless."""
        self.assertIs(self.hub.trigger("nothing"), self.hub)


if __name__ == "__main__":
    unittest.main()
