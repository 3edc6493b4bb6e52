# app.py
# CustomTkinter desktop client for the next-word engine (dark theme).
# - Model loads on a background asyncio loop (keeps UI responsive).
# - Offline suggestions on every keystroke; remote words after a quiet period.
# - Suggestion chips & event log panes.

from __future__ import annotations
import asyncio
import threading
from typing import List, Optional

import customtkinter as ctk

# Project imports (ensure PYTHONPATH=src or pip install -e .)
from nextword.engine import Engine
from nextword.models import Suggestion
from nextword.orchestrator import DebouncedOrchestrator
from nextword.remote import make_remote

REMOTE_COLOR = ("#7e22ce", "#c084fc")


# -------------------- small helpers --------------------

def apply_suggestion(text: str, word: str) -> str:
    """Insert `word` at the caret: replace the fragment being typed, or append after a space."""
    if text[-1:].isspace() or not text:
        return text + word + " "
    head = text.rstrip()
    cut = max(head.rfind(" "), head.rfind("\n"), head.rfind("\t"))
    return head[:cut + 1] + word + " "


class LoopThread:
    """A private asyncio loop running in a daemon thread."""

    def __init__(self) -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self.loop.run_forever, daemon=True)
        self._thread.start()

    def submit(self, coro):
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def call(self, fn, *args) -> None:
        self.loop.call_soon_threadsafe(fn, *args)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)


# -------------------- main app --------------------

class PredictionApp(ctk.CTk):
    """Dark-themed text pad with live next-word suggestions."""

    def __init__(self, engine: Engine) -> None:
        super().__init__()

        # Theme
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        # Window
        self.title("Next Word Prediction")
        self.geometry("900x620")
        self.minsize(720, 480)

        # State
        self.engine = engine
        self._loop = LoopThread()
        self._orchestrator: Optional[DebouncedOrchestrator] = None
        self._chips: List[ctk.CTkButton] = []

        # Fonts
        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_text = ctk.CTkFont(size=15)

        # Layout grid
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)  # editor
        self.grid_rowconfigure(3, weight=0)  # log

        # Build UI
        self._build_header()
        self._build_suggestions()
        self._build_editor()
        self._build_log()

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self._start_loading()

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        header.grid_columnconfigure(0, weight=1)

        title = ctk.CTkLabel(header, text="Next Word Prediction", font=self.font_title)
        title.grid(row=0, column=0, sticky="w", padx=12, pady=10)

        self.progress = ctk.CTkProgressBar(header, mode="indeterminate", determinate_speed=1.2)
        self.progress.grid(row=0, column=1, sticky="e", padx=(0, 6), pady=10)

        self.lbl_status = ctk.CTkLabel(header, text="Status: —", anchor="e")
        self.lbl_status.grid(row=0, column=2, sticky="e", padx=12, pady=10)

    def _build_suggestions(self) -> None:
        self.bar = ctk.CTkFrame(self, corner_radius=10, height=52)
        self.bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        self.lbl_hint = ctk.CTkLabel(self.bar, text="Loading model…", font=self.font_label)
        self.lbl_hint.grid(row=0, column=0, sticky="w", padx=12, pady=10)

    def _build_editor(self) -> None:
        self.txt = ctk.CTkTextbox(self, wrap="word", font=self.font_text)
        self.txt.grid(row=2, column=0, sticky="nsew", padx=12, pady=6)
        self.txt.bind("<KeyRelease>", self._on_text_changed)

    def _build_log(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(frame, text="Event log", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )
        self.txt_log = ctk.CTkTextbox(frame, height=90, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self._log("GUI ready.")

    # --------- loading pipeline (background loop) ---------

    def _start_loading(self) -> None:
        self._set_status("Loading model…")
        self.progress.start()
        future = self._loop.submit(self.engine.load())
        future.add_done_callback(lambda f: self.after(0, self._on_loaded, f.result()))

    def _on_loaded(self, ok: bool) -> None:
        self.progress.stop()
        if not ok:
            self._set_status("Model failed to load.")
            self._set_hint("Offline suggestions unavailable (model failed to load).")
            self._log(f"ERROR: {self.engine.error}")
            return
        self._orchestrator = self.engine.orchestrator(self._on_suggestions)
        remote = "on" if self.engine.remote is not None else "off"
        self._set_status(f"Ready (remote {remote}).")
        self._set_hint("Start typing for suggestions…")
        self._log(f"Model ready ({len(self.engine.loader.vocabulary):,} words).")
        self.txt.focus_set()

    # --------- typing ---------

    def _on_text_changed(self, _ev=None) -> None:
        if self._orchestrator is None:
            return
        # Tk textboxes always end with a newline
        text = self.txt.get("0.0", "end-1c")
        self._loop.call(self._orchestrator.text_changed, text)

    def _on_suggestions(self, items: List[Suggestion]) -> None:
        # called on the loop thread; hop to Tk
        self.after(0, self._render, list(items))

    def _render(self, items: List[Suggestion]) -> None:
        for chip in self._chips:
            chip.destroy()
        self._chips = []
        if not items:
            self._set_hint("Continue typing for suggestions…" if self.txt.get("0.0", "end-1c") else "")
            return
        self.lbl_hint.grid_remove()
        for col, item in enumerate(items):
            chip = ctk.CTkButton(
                self.bar, text=item.text, width=60, corner_radius=16,
                text_color=REMOTE_COLOR if item.is_remote else None,
                command=lambda w=item.text: self._pick(w),
            )
            chip.grid(row=0, column=col, padx=(12 if col == 0 else 4, 4), pady=10)
            self._chips.append(chip)

    def _pick(self, word: str) -> None:
        text = apply_suggestion(self.txt.get("0.0", "end-1c"), word)
        self.txt.delete("0.0", "end")
        self.txt.insert("end", text)
        self.txt.focus_set()
        self._on_text_changed()

    # --------- misc UI helpers ---------

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    def _set_hint(self, text: str) -> None:
        self.lbl_hint.configure(text=text)
        self.lbl_hint.grid()

    def _log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")

    # --------- lifecycle ---------

    def _on_close(self) -> None:
        if self._orchestrator is not None:
            self._loop.call(self._orchestrator.close)
        self._loop.stop()
        self.engine.shutdown()
        self.destroy()


if __name__ == "__main__":
    import argparse

    ap = argparse.ArgumentParser(description="Next-word prediction desktop client")
    ap.add_argument("--store", default="sqlite:///nextword-cache.sqlite", help="Model cache DSN")
    ap.add_argument("--model-url", default=None, help="Model JSON URL or path")
    ap.add_argument("--no-remote", action="store_true", help="Offline suggestions only")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    eng = Engine(
        store_dsn=args.store,
        model_source=args.model_url,
        remote=None if args.no_remote else make_remote(),
        verbose=args.verbose,
    )
    app = PredictionApp(eng)
    app.mainloop()
