#!/usr/bin/env python3
"""Interactive CLI script to chat with the dungeon master through a running server.

Usage:
    python play.py                          # talks to http://localhost:8080
    python play.py http://host:8080         # talks to another server

Keeps the conversation history the same way the browser client does
(Gemini-style turns) and sends it along with every message.
"""

import sys

import requests

# --- ANSI Colors ---
DIVIDER = "\033[90m" + "─" * 50 + "\033[0m"
DM_COLOR = "\033[96m"
RESET = "\033[0m"
DIM = "\033[90m"
BOLD = "\033[1m"
RED = "\033[91m"

DEFAULT_SERVER = "http://localhost:8080"


def make_turn(role: str, text: str) -> dict:
    """Build one history entry in the wire shape the server accepts."""
    return {"role": role, "parts": [{"text": text}]}


def send_chat(server: str, message: str, history: list[dict]) -> str | None:
    """POST a message to /api/chat and return the reply text."""
    try:
        resp = requests.post(
            f"{server}/api/chat",
            json={"message": message, "history": history},
            timeout=90,
        )
    except requests.exceptions.RequestException as e:
        print(f"\n  {RED}[Connection error] {e}{RESET}")
        return None

    try:
        data = resp.json()
    except ValueError:
        print(f"\n  {RED}[Unexpected response] HTTP {resp.status_code}{RESET}")
        return None

    if resp.status_code != 200:
        print(f"\n  {RED}[Server error] {data.get('error', resp.status_code)}{RESET}")
        return None
    return data.get("reply")


def chat(server: str) -> None:
    """Interactive chat session with the dungeon master."""
    history: list[dict] = []

    print()
    print(f"{BOLD}" + "=" * 50 + f"{RESET}")
    print(f"{BOLD}  Dungeon master chat{RESET}")
    print(f"  {DIM}server: {server}{RESET}")
    print(f"{BOLD}" + "=" * 50 + f"{RESET}")
    print()
    print(f"  {DIM}[type 'quit' to leave, 'reset' to forget the story]{RESET}")
    print()

    while True:
        try:
            user_input = input(f"  {BOLD}You{RESET}: ").strip()
        except (EOFError, KeyboardInterrupt):
            print(f"\n\n  {DIM}Session over.{RESET}")
            break

        if not user_input:
            continue

        if user_input.lower() in ("quit", "exit", "q"):
            print(f"\n  {DIM}The torches gutter out. Farewell.{RESET}\n")
            break

        if user_input.lower() == "reset":
            history = []
            print(f"\n  {DIM}(history cleared){RESET}\n")
            continue

        print(f"\n  {DIM}(thinking...){RESET}", end="", flush=True)
        reply = send_chat(server, user_input, history)
        # Clear "thinking" line
        print("\r" + " " * 30 + "\r", end="")

        if reply is None:
            continue

        history.append(make_turn("user", user_input))
        history.append(make_turn("model", reply))
        print(f"  {DM_COLOR}DM{RESET}: {reply}\n")
        print(DIVIDER)


def main():
    server = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else DEFAULT_SERVER
    chat(server)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{DIM}Bye.{RESET}")
