import os
import sys
import pathlib
import tempfile
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from catalog import ItemCatalog
from engine import GameEngine
from models import Intent
from services.narrative import build_prompt, parse_response
from state import GameConfig, GameState, TimeSegment, TimeState
from storage.saves import load_state, save_state


class ServiceTests(unittest.TestCase):
    def test_build_prompt(self) -> None:
        state = GameState(
            stats={"FINANCE": 100, "VITALITY": 90},
            time=TimeState(day=1, segment=TimeSegment.MORNING),
            location="coffee_shop",
        )
        prompt = build_prompt(state, Intent(type="Question", manner="Curious"), "Order a latte")
        self.assertIn("Morning (Day 1)", prompt)
        self.assertIn("Location: coffee_shop", prompt)
        self.assertIn("Outfit: Naked", prompt)
        self.assertIn('Action: "Order a latte"', prompt)
        self.assertIn("Intent: Question (Curious)", prompt)
        self.assertIn("Finance ($100)", prompt)
        self.assertNotIn("STRICT NARRATIVE RAILS", prompt)

    def test_build_prompt_lists_outfit(self) -> None:
        engine = GameEngine(ItemCatalog.default())
        engine.force_equip(engine.catalog.get("outfit_dress_sundress_01"))
        prompt = build_prompt(engine.state, None, "Twirl")
        self.assertIn("full_body: Flowery Sundress", prompt)
        self.assertIn("Intent: General Action", prompt)
        self.assertIn("Mitch (Trust:100)", prompt)

    def test_tutorial_rails_on_day_zero(self) -> None:
        engine = GameEngine()
        engine.new_game(GameConfig(tutorial=True))
        self.assertIn("STRICT NARRATIVE RAILS", build_prompt(engine.state, None, "Look"))
        engine.new_game(GameConfig(tutorial=False))
        self.assertNotIn("STRICT NARRATIVE RAILS", build_prompt(engine.state, None, "Look"))

    def test_parse_response_strips_fences(self) -> None:
        text = '```json\n{"narrative": "Hi.", "updates": {"moneyChange": 3}}\n```'
        narrative, updates = parse_response(text)
        self.assertEqual(narrative, "Hi.")
        self.assertEqual(updates.money_change, 3)

    def test_parse_response_falls_back_to_raw_text(self) -> None:
        for raw in ("not json", '{"story": "wrong key"}', "[1, 2]", '{"narrative": "x", "updates": 5}'):
            narrative, updates = parse_response(raw)
            self.assertEqual(narrative, raw)
            self.assertIsNone(updates)

    def test_json_round_trip(self) -> None:
        engine = GameEngine()
        engine.new_game(GameConfig(tutorial=False))
        engine.equip(0)
        engine.play_turn("Walk", None, lambda *a: '{"narrative": "You walk."}')
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "save.json")
            save_state(path, engine.state, name="Slot 1")
            loaded = load_state(path)
        self.assertEqual(engine.state, loaded)
