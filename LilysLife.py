"""Thin Tk based UI for Lily's Life.  All game logic lives in the engine.

Narrative and choice requests run on worker threads.  Workers only talk to
the engine and to :attr:`RPGGame.results`; the Tk main loop drains that
queue and redraws.
"""

from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
from pathlib import Path
from typing import Iterable, get_args

import genai_api as ga
from config import AppConfig, load_config
from engine import GameEngine, TurnInProgressError
from mechanics import display_stat
from models import Intent
from services.choices import suggest_choices
from services.narrative import NarrativeService
from state import GameConfig, HistoryEntry
from storage.saves import load_state, save_state

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("settings.json")
MISSING_KEY_NOTICE = "System: Please enter a valid API Key in the Settings Menu to play."
POLL_MS = 100

INTENT_TYPES = get_args(Intent.model_fields["type"].annotation)
INTENT_MANNERS = get_args(Intent.model_fields["manner"].annotation)


def render_history(history: Iterable[HistoryEntry]) -> str:
    """Format the message log; retracted entries are struck through."""
    lines = []
    for entry in history:
        text = f"> {entry.text}" if entry.role == "user" else entry.text
        if entry.retracted:
            text = "[UNDO] " + "".join(ch + "\u0336" for ch in text)
        lines.append(text)
    return "\n\n".join(lines)


class RPGGame:
    """Main application window.  Handles widgets and delegates logic."""

    def __init__(self, root: tk.Tk, config: AppConfig | None = None) -> None:
        self.root = root
        self.config = config or AppConfig()
        self.engine = GameEngine(dev_mode=self.config.dev_mode)
        self.narrative = NarrativeService(self.config.model)
        self.results: queue.Queue = queue.Queue()
        self.choice_intent: Intent | None = None
        self.choice_buttons: list[tk.Button] = []

        self.status = tk.Label(root, anchor="w")
        self.status.pack(fill=tk.X)
        self.text = tk.Text(root, height=20, width=60, wrap=tk.WORD)
        self.text.pack(fill=tk.BOTH, expand=True)

        self.choice_frame = tk.Frame(root)
        self.choice_frame.pack(fill=tk.X)

        intent_row = tk.Frame(root)
        intent_row.pack(fill=tk.X)
        self.intent_type = tk.StringVar(root, value=INTENT_TYPES[0])
        self.intent_manner = tk.StringVar(root, value=INTENT_MANNERS[0])
        tk.OptionMenu(intent_row, self.intent_type, *INTENT_TYPES).pack(side=tk.LEFT)
        tk.OptionMenu(intent_row, self.intent_manner, *INTENT_MANNERS).pack(side=tk.LEFT)
        self.suggest_button = tk.Button(intent_row, text="Suggest", command=self.on_suggest)
        self.suggest_button.pack(side=tk.LEFT)
        self.undo_button = tk.Button(intent_row, text="Undo", command=self.on_undo)
        self.undo_button.pack(side=tk.RIGHT)

        self.entry = tk.Entry(root)
        self.entry.pack(fill=tk.X)
        self.entry.bind("<Return>", self.on_command)

        self.root.after(POLL_MS, self._poll)

    def current_intent(self) -> Intent:
        return Intent(type=self.intent_type.get(), manner=self.intent_manner.get())

    # UI callbacks ---------------------------------------------------------
    def on_command(self, event: tk.Event | None = None) -> None:
        command = self.entry.get().strip()
        if self.submit(command):
            self.entry.delete(0, tk.END)

    def submit(self, text: str, intent: Intent | None = None) -> bool:
        """Start a turn for *text*.  Returns ``False`` if nothing was sent."""
        text = text.strip()
        if not text or self.engine.busy:
            return False

        if ga.ensure_client() is None:
            self.engine.notify(MISSING_KEY_NOTICE)
            self.refresh()
            return False

        try:
            pending = self.engine.begin_turn(text, intent)
        except TurnInProgressError:
            return False
        self.show_choices([])
        self.refresh()
        self._start(self._run_turn, pending)
        return True

    def on_suggest(self) -> None:
        if self.engine.busy:
            return
        client = ga.ensure_client()
        if client is None:
            self.engine.notify(MISSING_KEY_NOTICE)
            self.refresh()
            return
        intent = self.current_intent()
        self._start(self._run_suggest, self.engine.snapshot(), intent, client)

    def on_undo(self) -> None:
        if self.engine.undo():
            self.show_choices([])
            self.refresh()

    # Workers -------------------------------------------------------------
    def _start(self, target, *args) -> None:
        threading.Thread(target=target, args=args, daemon=True).start()

    def _run_turn(self, pending) -> None:
        try:
            reply = self.narrative.generate(pending.state, pending.intent, pending.text)
        except Exception:
            logger.exception("Narrative request failed")
            self.engine.fail_turn()
        else:
            self.engine.complete_turn(reply)
        self.results.put(("turn", None))

    def _run_suggest(self, state, intent: Intent, client) -> None:
        choices = suggest_choices(state, intent, client, self.config.model)
        self.results.put(("choices", (intent, choices)))

    def _poll(self) -> None:
        self.drain()
        self.root.after(POLL_MS, self._poll)

    def drain(self) -> None:
        """Apply every finished worker result on the Tk thread."""
        while True:
            try:
                kind, payload = self.results.get_nowait()
            except queue.Empty:
                return
            if kind == "choices":
                intent, choices = payload
                self.show_choices(choices, intent)
            self.refresh()

    # Rendering -----------------------------------------------------------
    def show_choices(self, choices: list[str], intent: Intent | None = None) -> None:
        """Replace the choice buttons; picking one submits it with *intent*."""
        for button in self.choice_buttons:
            button.destroy()
        self.choice_intent = intent
        self.choice_buttons = []
        for choice in choices:
            button = tk.Button(
                self.choice_frame,
                text=choice,
                anchor="w",
                command=lambda c=choice: self.submit(c, self.choice_intent),
            )
            button.pack(fill=tk.X)
            self.choice_buttons.append(button)

    def refresh(self) -> None:
        state = self.engine.snapshot()
        stats = self.engine.effective_stats()
        self.status.config(
            text=(
                f"Day {state.time.day} - {state.time.segment.value} "
                f"[{state.time.slots_used}] @ {state.location} | "
                f"${display_stat('FINANCE', stats.get('FINANCE', 0)):g} | "
                f"Class {display_stat('SOCIAL_CLASS', stats.get('SOCIAL_CLASS', 0)):g}"
            )
        )
        self.text.delete("1.0", tk.END)
        self.text.insert(tk.END, render_history(state.history))
        self.text.see(tk.END)

    # Persistence ---------------------------------------------------------
    def new_game(self) -> None:
        choices = self.engine.new_game(GameConfig(tutorial=self.config.tutorial))
        self.show_choices(choices)
        self.refresh()

    def save(self, path: str | Path) -> None:
        save_state(path, self.engine.snapshot())

    def load(self, path: str | Path) -> None:
        self.engine.load(load_state(path))
        self.show_choices([])
        self.refresh()


def main() -> None:
    config = load_config(CONFIG_PATH)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root = tk.Tk()
    root.title("Lily's Life")
    app = RPGGame(root, config)
    app.new_game()
    root.mainloop()


if __name__ == "__main__":
    main()
