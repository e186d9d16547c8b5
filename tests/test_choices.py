import sys
import pathlib
import json
from types import SimpleNamespace

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from engine import GameEngine
from models import Intent
from services.choices import (
    CONNECTION_FALLBACK,
    EMPTY_FALLBACK,
    PARSE_FALLBACK,
    build_choice_prompt,
    parse_choices,
    suggest_choices,
)
from state import GameConfig

INTENT = Intent(type="Challenge", manner="Teasing")


def test_parse_choices_caps_at_four():
    text = json.dumps(["a", "b", "c", "d", "e"])
    assert parse_choices(text) == ["a", "b", "c", "d"]


def test_parse_choices_strips_fences():
    assert parse_choices('```json\n["Smile", "[WIT] Quip"]\n```') == ["Smile", "[WIT] Quip"]


def test_parse_choices_fallbacks():
    assert parse_choices("Here are some ideas") == PARSE_FALLBACK
    assert parse_choices("") == EMPTY_FALLBACK
    assert parse_choices(None) == EMPTY_FALLBACK
    assert parse_choices("[]") == EMPTY_FALLBACK
    assert parse_choices('{"choices": ["a"]}') == EMPTY_FALLBACK


def test_choice_prompt_mentions_intent_and_tutorial():
    engine = GameEngine()
    engine.new_game(GameConfig(tutorial=True))
    prompt = build_choice_prompt(engine.state, INTENT)
    assert "**Challenge** with a **Teasing** manner" in prompt
    assert "[CHOICE BLOCK]" in prompt
    assert "Mitch (Trust:100, Attraction:0)" in prompt


def test_suggest_choices_does_not_touch_state():
    engine = GameEngine()
    before = engine.snapshot()
    client = SimpleNamespace(
        models=SimpleNamespace(
            generate_content=lambda **kw: SimpleNamespace(text='["Push back", "Shrug"]')
        )
    )
    assert suggest_choices(engine.state, INTENT, client) == ["Push back", "Shrug"]
    assert engine.state == before


def test_suggest_choices_connection_error():
    def boom(**kw):
        raise ConnectionError("offline")

    client = SimpleNamespace(models=SimpleNamespace(generate_content=boom))
    assert suggest_choices(GameEngine().state, INTENT, client) == CONNECTION_FALLBACK
