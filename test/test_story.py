import unittest

from carescape.story import StoryMode, StoryNavigator, StoryState, wrap_longitude
from test.fixtures.color_records import mock_markers
from test.fixtures.story import FakeCamera, FakeClock, FakeKeyboard


class TestStoryNavigator(unittest.TestCase):
    def setUp(self):
        self.camera = FakeCamera()
        self.keyboard = FakeKeyboard()
        self.clock = FakeClock()
        self.navigator = StoryNavigator(
            self.camera, keyboard=self.keyboard, clock=self.clock
        )
        self.navigator.update_markers(mock_markers([(10, 20), (11, 21), (12, 22)]))

    def test_starts_idle(self):
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)
        self.assertIsNone(self.navigator.active_id)
        self.assertFalse(self.navigator.is_animating)
        self.assertEqual(self.navigator.state.ordered_ids, ("a", "b", "c"))
        self.assertEqual(self.keyboard.listeners, [])

    def test_select_flies_to_record(self):
        self.assertTrue(self.navigator.select("b"))
        self.assertEqual(self.navigator.mode, StoryMode.ACTIVE)
        self.assertEqual(self.navigator.active_id, "b")

        (command,) = self.camera.commands
        self.assertAlmostEqual(command.center.lat, 11.0)
        self.assertAlmostEqual(command.center.lng, 21.02)
        self.assertEqual(command.zoom, 12.0)
        self.assertEqual(command.duration_ms, 2000)

    def test_select_unknown_record(self):
        self.assertFalse(self.navigator.select("zzz"))
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)
        self.assertEqual(self.camera.commands, [])

    def test_select_while_active_retargets(self):
        self.navigator.select("a")
        self.navigator.select("c")
        self.assertEqual(self.navigator.active_id, "c")
        self.assertEqual(len(self.camera.commands), 2)
        self.assertEqual(len(self.keyboard.listeners), 1)

    def test_next_and_previous(self):
        self.navigator.select("a")
        self.assertTrue(self.navigator.next())
        self.assertEqual(self.navigator.active_id, "b")
        self.assertTrue(self.navigator.next())
        self.assertEqual(self.navigator.active_id, "c")
        self.assertTrue(self.navigator.previous())
        self.assertEqual(self.navigator.active_id, "b")
        self.assertEqual(len(self.camera.commands), 4)

    def test_clamped_at_ends(self):
        self.navigator.select("c")
        self.assertFalse(self.navigator.next())
        self.assertEqual(self.navigator.active_id, "c")

        self.navigator.select("a")
        self.assertFalse(self.navigator.previous())
        self.assertEqual(self.navigator.active_id, "a")
        self.assertEqual(len(self.camera.commands), 2)

    def test_next_while_idle_does_nothing(self):
        self.assertFalse(self.navigator.next())
        self.assertFalse(self.navigator.previous())
        self.assertEqual(self.camera.commands, [])

    def test_close(self):
        self.navigator.select("b")
        self.navigator.close()
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)
        self.assertIsNone(self.navigator.active_id)
        self.assertEqual(self.keyboard.listeners, [])
        # Closing again is harmless
        self.navigator.close()
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)

    def test_keyboard_navigation(self):
        self.navigator.select("a")
        self.assertEqual(len(self.keyboard.listeners), 1)

        self.keyboard.press("ArrowRight")
        self.assertEqual(self.navigator.active_id, "b")
        self.keyboard.press("ArrowDown")
        self.assertEqual(self.navigator.active_id, "c")
        self.keyboard.press("ArrowUp")
        self.assertEqual(self.navigator.active_id, "b")
        self.keyboard.press("ArrowLeft")
        self.assertEqual(self.navigator.active_id, "a")
        self.keyboard.press("Enter")
        self.assertEqual(self.navigator.active_id, "a")

        self.keyboard.press("Escape")
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)
        self.assertEqual(self.keyboard.listeners, [])

    def test_keys_ignored_when_idle(self):
        self.navigator.handle_key("ArrowRight")
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)
        self.assertEqual(self.camera.commands, [])

    def test_navigation_during_animation_is_allowed(self):
        self.navigator.select("a")
        self.assertTrue(self.navigator.is_animating)
        self.clock.advance(0.5)
        self.assertTrue(self.navigator.next())
        self.assertEqual(self.navigator.active_id, "b")
        self.assertTrue(self.navigator.is_animating)

    def test_animation_finishes(self):
        self.navigator.select("a")
        self.clock.advance(1.5)
        self.assertTrue(self.navigator.is_animating)
        self.clock.advance(1.0)
        self.assertFalse(self.navigator.is_animating)
        self.assertEqual(self.navigator.mode, StoryMode.ACTIVE)

    def test_update_keeps_active_record(self):
        self.navigator.select("b")
        self.navigator.update_markers(mock_markers([(0, 0), (11, 21)]))
        self.assertEqual(self.navigator.mode, StoryMode.ACTIVE)
        self.assertEqual(self.navigator.active_id, "b")
        self.assertEqual(self.navigator.state.ordered_ids, ("a", "b"))
        self.assertFalse(self.navigator.next())

    def test_update_drops_filtered_out_record(self):
        self.navigator.select("c")
        self.navigator.update_markers(mock_markers([(10, 20), (11, 21)]))
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)
        self.assertIsNone(self.navigator.active_id)
        self.assertEqual(self.keyboard.listeners, [])

    def test_empty_record_list(self):
        self.navigator.update_markers([])
        self.assertFalse(self.navigator.select("a"))
        self.assertFalse(self.navigator.next())
        self.assertEqual(self.navigator.mode, StoryMode.IDLE)

    def test_single_record(self):
        self.navigator.update_markers(mock_markers([(1, 1)]))
        self.navigator.select("a")
        self.assertFalse(self.navigator.next())
        self.assertFalse(self.navigator.previous())
        self.assertEqual(self.navigator.active_id, "a")

    def test_without_keyboard(self):
        navigator = StoryNavigator(self.camera, clock=self.clock)
        navigator.update_markers(mock_markers([(1, 1), (2, 2)]))
        navigator.select("a")
        navigator.handle_key("ArrowRight")
        self.assertEqual(navigator.active_id, "b")
        navigator.close()
        self.assertEqual(navigator.mode, StoryMode.IDLE)

    def test_longitude_offset_wraps(self):
        self.navigator.update_markers(mock_markers([(0, 179.99)]))
        self.navigator.select("a")
        command = self.camera.commands[-1]
        self.assertAlmostEqual(command.center.lng, -179.99)


class TestStoryState(unittest.TestCase):
    def test_idle_state_has_no_active_record(self):
        with self.assertRaises(ValueError):
            StoryState(mode=StoryMode.IDLE, ordered_ids=("a",), active_id="a")

    def test_active_record_must_be_listed(self):
        with self.assertRaises(ValueError):
            StoryState(mode=StoryMode.ACTIVE, ordered_ids=("a",), active_id="b")
        with self.assertRaises(ValueError):
            StoryState(mode=StoryMode.ACTIVE, ordered_ids=())

    def test_active_index(self):
        state = StoryState(mode=StoryMode.ACTIVE, ordered_ids=("a", "b"), active_id="b")
        self.assertEqual(state.active_index, 1)
        self.assertIsNone(StoryState().active_index)


class TestWrapLongitude(unittest.TestCase):
    def test_wrap(self):
        self.assertEqual(wrap_longitude(10.0), 10.0)
        self.assertEqual(wrap_longitude(180.0), 180.0)
        self.assertAlmostEqual(wrap_longitude(190.0), -170.0)
        self.assertAlmostEqual(wrap_longitude(-190.0), 170.0)


if __name__ == "__main__":
    unittest.main()
