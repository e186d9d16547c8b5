import importlib
import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

tk = pytest.importorskip("tkinter")

from state import HistoryEntry


def test_import_does_not_start_tk():
    if tk._default_root is not None:
        tk._default_root.destroy()
        tk._default_root = None
    importlib.invalidate_caches()
    mod = importlib.import_module("LilysLife")
    importlib.reload(mod)
    assert tk._default_root is None


def test_render_history_marks_retracted_entries():
    app = importlib.import_module("LilysLife")
    text = app.render_history(
        [
            HistoryEntry(role="model", text="Start."),
            HistoryEntry(role="user", text="Go", retracted=True),
        ]
    )
    first, second = text.split("\n\n")
    assert first == "Start."
    assert second.startswith("[UNDO] ")
    assert second.replace("\u0336", "") == "[UNDO] > Go"


REPLY = '{"narrative": "Mitch laughs.", "updates": {"moneyChange": -4}}'


@pytest.fixture
def app(monkeypatch):
    try:
        root = tk.Tk()
    except tk.TclError:
        pytest.skip("no display available")
    root.withdraw()
    mod = importlib.import_module("LilysLife")
    from config import AppConfig

    game = mod.RPGGame(root, AppConfig(tutorial=True))
    # Run workers inline; results still travel through the queue.
    monkeypatch.setattr(game, "_start", lambda target, *args: target(*args))
    monkeypatch.setattr(mod.ga, "ensure_client", lambda: object())
    yield mod, game
    root.destroy()


def test_tutorial_choices_are_buttons(app):
    from catalog import TUTORIAL_PHASE_1_CHOICES

    _, game = app
    game.new_game()
    assert [b.cget("text") for b in game.choice_buttons] == list(TUTORIAL_PHASE_1_CHOICES)
    assert game.choice_intent is None


def test_picking_a_choice_plays_a_turn(app, monkeypatch):
    _, game = app
    game.new_game()
    monkeypatch.setattr(game.narrative, "generate", lambda state, intent, text: REPLY)
    first = game.choice_buttons[0].cget("text")

    game.choice_buttons[0].invoke()
    assert game.choice_buttons == []
    assert game.engine.state.history[-1].text == "Mitch laughs."
    assert "Mitch laughs." not in game.text.get("1.0", "end")

    game.drain()
    assert "Mitch laughs." in game.text.get("1.0", "end")
    assert game.engine.state.history[-2].text == first
    assert game.engine.state.stats["FINANCE"] == 96


def test_suggested_choices_carry_the_intent(app, monkeypatch):
    mod, game = app
    game.new_game()
    seen = {}

    def fake_suggest(state, intent, client, model):
        seen["intent"] = intent
        seen["model"] = model
        return ["Ask about work", "[WIT] Tease him"]

    monkeypatch.setattr(mod, "suggest_choices", fake_suggest)
    monkeypatch.setattr(game.narrative, "generate", lambda state, intent, text: REPLY)
    game.intent_type.set("Question")
    game.intent_manner.set("Flirty")

    game.on_suggest()
    game.drain()
    assert seen["intent"].label() == "Question - Flirty"
    assert seen["model"] == game.config.model
    assert [b.cget("text") for b in game.choice_buttons] == ["Ask about work", "[WIT] Tease him"]

    game.choice_buttons[1].invoke()
    assert game.engine.state.history[-2].text == "[Question - Flirty] [WIT] Tease him"


def test_missing_key_notifies_instead_of_playing(app, monkeypatch):
    mod, game = app
    game.new_game()
    monkeypatch.setattr(mod.ga, "ensure_client", lambda: None)
    assert game.submit("Hello") is False
    assert game.engine.state.history[-1].text == mod.MISSING_KEY_NOTICE
    assert game.engine.undo_depth == 0


def test_modules_keep_their_docstrings():
    import state

    app = importlib.import_module("LilysLife")
    assert state.__doc__ == "Game state dataclasses."
    assert app.__doc__.startswith("Thin Tk based UI")
