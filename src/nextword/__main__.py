from __future__ import annotations
import argparse, asyncio, json, os, sys
from typing import List

from .engine import Engine
from .models import Suggestion
from .remote import make_remote
from . import config as CFG

def _supports_color() -> bool:
    return sys.stdout.isatty() and os.environ.get("NO_COLOR", "") == ""

CSI = "\033["
def _c(text: str, code: str) -> str:
    if not _supports_color(): return text
    return f"{CSI}{code}m{text}{CSI}0m"

def _clear_screen():
    # ANSI clear; fallback to newlines if not a TTY
    if sys.stdout.isatty():
        print("\033[2J\033[H", end="", flush=True)
    else:
        print("\n" * 100)

def _print_row(rows: List[Suggestion], as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.to_dict() for r in rows], ensure_ascii=False))
        return
    if not rows:
        print(_c("(no suggestions)", "2;37")); return
    # remote words in magenta
    print("  ".join(_c(r.text, "35") if r.is_remote else r.text for r in rows))

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Next-word prediction CLI (offline n-gram + optional remote)")
    p.add_argument("--store", default=None, help=f"Model cache DSN (default {CFG.STORE_DSN})")
    p.add_argument("--model-url", default=None, help="Model JSON URL or path (cold-cache source)")
    p.add_argument("--q", default=None, help="Single text to predict for (trailing space = next word)")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--remote", action=argparse.BooleanOptionalAction, default=False,
                   help="Blend in Gemini suggestions (needs GEMINI_API_KEY)")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)

    eng = Engine(
        store_dsn=args.store,
        model_source=args.model_url,
        remote=make_remote() if args.remote else None,
        verbose=args.verbose,
    )
    try:
        if not asyncio.run(eng.load()):
            print(_c(f"Offline suggestions unavailable: {eng.error}", "1;31"), file=sys.stderr)
            return 1

        def run_query(text: str) -> None:
            rows = asyncio.run(eng.suggest(text))
            _print_row(rows, args.json)

        if args.q is not None:
            run_query(args.q)

        if args.repl:
            print("Type text and press Enter (empty to quit). End a line with a space for next-word mode.")
            print(_c("Commands: # or :reset clears the buffer, :clear clears the screen", "2;37"))
            buffer = ""
            while True:
                try:
                    raw = input("> ")
                except (EOFError, KeyboardInterrupt):
                    print(); break
                cmd = raw.strip().lower()
                if raw == "":
                    break
                if cmd in ("#", ":reset"):
                    buffer = ""; print(_c("(reset)", "2;36")); continue
                if cmd in (":clear", ":cls"):
                    _clear_screen(); continue
                buffer += raw
                print(_c(f"[text] {buffer!r}", "2;37"))
                run_query(buffer)
        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
