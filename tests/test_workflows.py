import random
import typing
import unittest

from raffle.controller import REDRAW_KEY, RESET_KEY, LotteryScreen
from raffle.draw import DrawEngine, DrawState
from raffle.errors import ConfigurationError
from raffle.ledger import InventoryLedger, WinnerLedger
from raffle.models import Page, Participant, SessionAggregate
from raffle.page_flow import PageFlowGuard
from raffle.storage import MemoryBackend
from raffle.store import DEFAULT_STORAGE_KEY, SessionStore
from raffle.workflows import build_prize, configure_session, reset_session, select_prize

IMAGE = "data:image/png;base64,AA=="


class ConfigureSessionTestCase(unittest.TestCase):
    def setUp(self):
        self.backend = MemoryBackend()
        self.store = SessionStore(self.backend)
        self.participants = [
            Participant(id="a", full_name="Ana", position="Manager"),
            Participant(id="b", full_name="Luis", position="Technician"),
        ]

    def test_configure_opens_prize_selection(self):
        prize = build_prize("  Smart TV ", 2, IMAGE)
        page = configure_session(self.store, self.participants, [prize])

        self.assertEqual(page, Page.PRIZE_SELECTION)
        state = SessionStore.open(self.backend).state
        self.assertTrue(state.is_configured)
        self.assertEqual(state.current_page, Page.PRIZE_SELECTION)
        self.assertEqual(state.prizes[0].name, "Smart TV")
        self.assertEqual(state.prizes[0].initial_quantity, 2)
        self.assertTrue(state.prizes[0].id.startswith("prize-"))

    def test_build_prize_rejects_empty_lot(self):
        with self.assertRaises(ConfigurationError):
            build_prize("Mug", 0, IMAGE)

    def test_build_prize_avoids_existing_ids(self):
        first = build_prize("Mug", 1, IMAGE)
        second = build_prize("Cup", 1, IMAGE, existing_ids=[first.id])
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(build_prize("Pen", 1, IMAGE, prize_id="p-9").id, "p-9")

    def test_invalid_configuration_leaves_session_untouched(self):
        cases = [
            ([], [build_prize("TV", 1, IMAGE)]),
            (self.participants, []),
            (self.participants, [build_prize("TV", 1, "")]),
            (self.participants, [build_prize("   ", 1, IMAGE)]),
        ]
        for participants, prizes in cases:
            with self.assertRaises(ConfigurationError):
                configure_session(self.store, participants, prizes)
        self.assertEqual(self.store.state, SessionAggregate.initial())
        self.assertIsNone(self.backend.get_item(DEFAULT_STORAGE_KEY))

    def test_select_prize_enters_lottery(self):
        prize = build_prize("TV", 1, IMAGE, prize_id="p1")
        configure_session(self.store, self.participants, [prize])
        self.assertEqual(select_prize(self.store, "p1"), Page.LOTTERY)
        self.assertEqual(self.store.state.selected_prize_id, "p1")
        with self.assertRaises(ValueError):
            select_prize(self.store, "unknown")

    def test_reset_returns_to_config_from_any_page(self):
        prize = build_prize("TV", 1, IMAGE, prize_id="p1")
        for page in (Page.PRIZE_SELECTION, Page.LOTTERY, Page.WINNERS):
            configure_session(self.store, self.participants, [prize])
            select_prize(self.store, "p1")
            self.store.set_current_page(page)

            self.assertEqual(reset_session(self.store), Page.CONFIG)
            self.assertEqual(self.store.state, SessionAggregate.initial())
            self.assertIsNone(self.backend.get_item(DEFAULT_STORAGE_KEY))


class LotteryScreenTestCase(unittest.TestCase):
    def setUp(self):
        self.backend = MemoryBackend()
        self.store = SessionStore(self.backend)
        configure_session(
            self.store,
            [
                Participant(id="a", full_name="Ana", position="Manager"),
                Participant(id="b", full_name="Luis", position="Technician"),
                Participant(id="c", full_name="Carmen", position="Analyst"),
            ],
            [build_prize("TV", 2, IMAGE, prize_id="p1")],
        )
        select_prize(self.store, "p1")
        guard = PageFlowGuard(self.store)
        engine = DrawEngine(self.store, guard=guard, rng=random.Random(5))
        self.screen = LotteryScreen(self.store, engine=engine, guard=guard)

    def _settle(self, start_ms=0):
        self.screen.frame(start_ms)
        self.screen.frame(start_ms + 10_000)
        self.screen.frame(start_ms + 14_000)

    def test_mount_without_selection_redirects(self):
        with self.store.transaction() as state:
            state.selected_prize_id = None
        self.assertEqual(self.screen.mount(), Page.CONFIG)

    def test_click_starts_then_confirms(self):
        self.assertEqual(self.screen.mount(), Page.LOTTERY)
        self.assertIsNone(self.screen.click())
        self.assertEqual(self.screen.engine.state, DrawState.SPINNING)
        self.assertIsNone(self.screen.click())

        self._settle()
        winner = self.screen.click()
        self.assertIsNotNone(winner)
        self.assertEqual(len(self.store.state.winners), 1)
        self.assertEqual(self.store.state.current_page, Page.PRIZE_SELECTION)

    def test_redraw_key_only_when_settled(self):
        self.screen.mount()
        self.assertFalse(self.screen.key_enabled(REDRAW_KEY))
        self.assertFalse(self.screen.handle_key(REDRAW_KEY))
        self.screen.click()
        self.assertFalse(self.screen.handle_key(REDRAW_KEY))

        self._settle()
        self.assertTrue(self.screen.key_enabled(REDRAW_KEY))
        self.assertTrue(self.screen.handle_key(REDRAW_KEY))
        self.assertEqual(self.screen.engine.state, DrawState.SPINNING)
        self.assertEqual(self.store.state.winners, [])

    def test_reset_key_opens_prompt_and_confirm_wipes_session(self):
        self.screen.mount()
        self.screen.click()
        self.screen.frame(0)
        self.assertTrue(self.screen.key_enabled(RESET_KEY))
        self.assertTrue(self.screen.handle_key(RESET_KEY))
        self.assertTrue(self.screen.reset_prompt_open)

        self.screen.cancel_reset()
        self.assertFalse(self.screen.reset_prompt_open)
        self.assertEqual(self.screen.engine.state, DrawState.SPINNING)

        self.screen.handle_key(RESET_KEY)
        self.assertEqual(self.screen.confirm_reset(), Page.CONFIG)
        self.assertFalse(self.screen.reset_prompt_open)
        self.assertEqual(self.screen.engine.state, DrawState.IDLE)
        self.assertEqual(self.store.state, SessionAggregate.initial())
        self.assertIsNone(self.backend.get_item(DEFAULT_STORAGE_KEY))

    def test_unknown_keys_are_ignored(self):
        self.assertFalse(self.screen.handle_key("F1"))
        self.assertFalse(self.screen.key_enabled("F1"))

    def test_unmount_cancels_the_draw(self):
        self.screen.mount()
        self.screen.click()
        self.screen.unmount()
        self.screen.frame(0)
        self.screen.frame(20_000)
        self.assertEqual(self.screen.engine.state, DrawState.IDLE)
        self.assertEqual(self.store.state.winners, [])


class StoreBoundSignaturesTestCase(unittest.TestCase):
    names = {
        "DrawEngine": DrawEngine,
        "PageFlowGuard": PageFlowGuard,
        "SessionStore": SessionStore,
    }

    def _hints(self, func) -> dict:
        return typing.get_type_hints(func, localns=self.names)

    def test_collaborators_declare_the_store_type(self) -> None:
        for cls in (DrawEngine, InventoryLedger, WinnerLedger, PageFlowGuard, LotteryScreen):
            with self.subTest(cls=cls.__name__):
                self.assertIs(self._hints(cls.__init__)["store"], SessionStore)

    def test_optional_collaborators_are_typed(self) -> None:
        self.assertEqual(
            self._hints(DrawEngine.__init__)["guard"], typing.Optional[PageFlowGuard]
        )
        self.assertEqual(
            self._hints(LotteryScreen.__init__)["engine"], typing.Optional[DrawEngine]
        )
        self.assertEqual(
            self._hints(reset_session)["engine"], typing.Optional[DrawEngine]
        )


if __name__ == "__main__":
    unittest.main()
