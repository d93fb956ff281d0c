from __future__ import annotations
import argparse
import os
import sys
from typing import Optional, Dict, Any, List

import requests

from config import Config

DEFAULT_BASE_URL = Config.BASE_URL

# -----------------------------
# Simple HTTP client helpers
# -----------------------------
def _post(base_url: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    url = f"{base_url.rstrip('/')}{path}"
    r = requests.post(url, json=payload or {}, timeout=60)
    if r.status_code >= 400:
        print(f"\n[CLIENT] HTTP {r.status_code} from {url}")
        try:
            print("[CLIENT] Body:", r.json())
        except ValueError:
            print("[CLIENT] Body:", r.text[:1000])
        r.raise_for_status()
    return r.json()

def _get(base_url: str, path: str) -> Any:
    url = f"{base_url.rstrip('/')}{path}"
    r = requests.get(url, timeout=60)
    r.raise_for_status()
    return r.json()

# -----------------------------
# API wrappers
# -----------------------------
def new_game(base_url: str) -> Dict[str, Any]:
    return _post(base_url, "/v1/dice/session")

def choose_face(base_url: str, face: int) -> Dict[str, Any]:
    return _post(base_url, "/v1/dice/session/choose", {"face": face})

def roll(base_url: str) -> Dict[str, Any]:
    return _post(base_url, "/v1/dice/session/roll")

def save_score(base_url: str, player_id: str) -> Dict[str, Any]:
    return _post(base_url, "/v1/dice/session/save", {"player_id": player_id})

def get_state(base_url: str) -> Dict[str, Any]:
    return _get(base_url, "/v1/dice/session")

def get_leaderboard(base_url: str) -> List[Dict[str, Any]]:
    return _get(base_url, "/v1/dice/leaderboard")

# -----------------------------
# Pretty printers
# -----------------------------
def short_address(address: Optional[str]) -> str:
    if not address:
        return "Guest"
    if address.startswith("0x") and len(address) > 10:
        return f"{address[:6]}...{address[-4:]}"
    return address

def rank_icon(rank: int) -> str:
    return {1: "🥇", 2: "🥈", 3: "🥉"}.get(rank, f"#{rank}")

def print_state(state: Dict[str, Any]) -> None:
    roll_txt = " ".join(str(d) for d in state["last_roll"]) if state.get("last_roll") else "? ? ?"
    print("\n===== DICE =====")
    print(f"Dice:         {roll_txt}")
    print(f"Chosen:       {state.get('chosen_face') or '-'}")
    print(f"Hits:         {state['hit_count']}")
    print(f"Round score:  {state['last_round_award']}")
    print(f"Score:        {state['cumulative_score']}   (best {state['best_score']})")
    print(f"Rolls:        {state['rounds_played']}/{state['rounds_played'] + state['rounds_left']}")
    print("=" * 16)

def print_leaderboard(entries: List[Dict[str, Any]], player_id: Optional[str] = None) -> None:
    print("\n===== LEADERBOARD =====")
    if not entries:
        print("No scores yet.")
    for e in entries:
        mine = bool(player_id) and e["wallet"].lower() == player_id.lower()
        marker = "  <- you" if mine else ""
        print(f"{rank_icon(e['rank']):>4}  {e['player']:<20} {short_address(e['wallet']):<14} {e['score']:>8}{marker}")
    print("=" * 23)

def print_save_result(res: Dict[str, Any]) -> None:
    if res["success"]:
        tx = res.get("transaction_id") or ""
        print(f"✅ Score saved! Score: {res['state']['cumulative_score']}  Transaction: {short_address(tx)}")
    else:
        print(f"❌ Failed to save score: {res.get('error') or 'Unknown error'}")

# -----------------------------
# Interactive play loop
# -----------------------------
HELP = "Keys: 1-6 choose face | r or Enter roll | n new game | s save | l leaderboard | q quit"

def interactive_play(base_url: str, player_id: Optional[str]) -> None:
    state = new_game(base_url)
    print(f"\n🎲 Welcome to Monad Dice, {short_address(player_id)}!")
    print(HELP)
    print_state(state)

    while True:
        cmd = input("> ").strip().lower()
        if cmd in ("1", "2", "3", "4", "5", "6"):
            res = choose_face(base_url, int(cmd))
            state = res["state"]
            print(f"Chosen face: {state['chosen_face']}")
        elif cmd in ("", "r"):
            if state.get("chosen_face") is None:
                print("Choose a die face first.")
                continue
            if state["rounds_left"] == 0:
                print("No more rolls left. Press n for a new game.")
                continue
            print("Rolling...")
            res = roll(base_url)
            state = res["state"]
            print_state(state)
        elif cmd == "n":
            state = new_game(base_url)
            print_state(state)
        elif cmd == "s":
            if not player_id:
                print("Please pass --player to save your score.")
                continue
            print_save_result(save_score(base_url, player_id))
        elif cmd == "l":
            print_leaderboard(get_leaderboard(base_url), player_id)
        elif cmd == "q":
            return
        else:
            print(HELP)

# -----------------------------
# Auto-demo play loop
# -----------------------------
def auto_demo_play(base_url: str, player_id: Optional[str]) -> None:
    """
    Plays a full 10-roll session on face 4 for quick verification.
    """
    print("\n🤖 Running auto-demo...")
    new_game(base_url)
    choose_face(base_url, 4)
    while True:
        res = roll(base_url)
        if not res["accepted"]:
            break
        print_state(res["state"])

    if player_id:
        print_save_result(save_score(base_url, player_id))

# -----------------------------
# Run server (programmatically)
# -----------------------------
def run_server(port: int, host: str = "127.0.0.1", reload: bool = True, no_persist: bool = False) -> None:
    import uvicorn
    if no_persist:
        # read by config in the server process (and its reloader children)
        os.environ["DICE_NO_PERSIST"] = "1"
    uvicorn.run("api:app", host=host, port=port, reload=reload)

# -----------------------------
# Health checker
# -----------------------------
def health_check(base_url: str) -> None:
    print(f"🔎 Checking server at {base_url} ...")
    try:
        r = requests.get(f"{base_url.rstrip('/')}/docs", timeout=10)
        r.raise_for_status()
        print("✅ /docs reachable")

        state = get_state(base_url)
        print(f"✅ JSON API ok (phase={state['phase']}, best={state['best_score']})")
    except requests.RequestException as e:
        print(f"❌ Health check failed: {e}")
        sys.exit(1)

# -----------------------------
# CLI
# -----------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Monad Dice: server + client in one file")

    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("serve", help="Start the FastAPI server (uvicorn)")
    ps.add_argument("--port", type=int, default=8000, help="Port to bind")
    ps.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind")
    ps.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    ps.add_argument("--no-persist", action="store_true", help="Keep the best score in memory only")

    pp = sub.add_parser("play", help="Play a 10-roll session (interactive or auto)")
    pp.add_argument("--player", type=str, default=None, help="Wallet address used when saving scores")
    pp.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")
    pp.add_argument("--auto-demo", action="store_true", help="Run a canned demo instead of prompting")

    pl = sub.add_parser("leaderboard", help="Show the top scores")
    pl.add_argument("--player", type=str, default=None, help="Highlight this wallet address")
    pl.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")

    ph = sub.add_parser("health", help="Check server availability")
    ph.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")

    return p.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    if args.cmd == "serve":
        run_server(port=args.port, host=args.host, reload=(not args.no_reload), no_persist=args.no_persist)
        return

    if args.cmd == "play":
        try:
            requests.get(f"{args.base_url.rstrip('/')}/docs", timeout=5).raise_for_status()
        except requests.RequestException:
            print("⚠️  Could not reach the server. Is it running?\n"
                  "    Start it in another terminal:\n"
                  "    python main.py serve")
            sys.exit(1)

        if args.auto_demo:
            auto_demo_play(args.base_url, args.player)
        else:
            interactive_play(args.base_url, args.player)
        return

    if args.cmd == "leaderboard":
        try:
            print_leaderboard(get_leaderboard(args.base_url), args.player)
        except requests.RequestException as e:
            print(f"❌ Unable to load leaderboard: {e}")
            sys.exit(1)
        return

    if args.cmd == "health":
        health_check(args.base_url)
        return

    print("Unknown command. Try: python main.py --help")
    sys.exit(2)

if __name__ == "__main__":
    main()
