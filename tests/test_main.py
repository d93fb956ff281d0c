import os

import uvicorn
import main

def test_serve_no_persist_flag():
    args = main.parse_args(["serve", "--no-persist", "--no-reload"])
    assert args.no_persist and args.no_reload
    assert main.parse_args(["serve"]).no_persist is False

def test_run_server_hands_no_persist_to_the_app(monkeypatch):
    calls = []
    monkeypatch.setenv("DICE_NO_PERSIST", "")
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    main.run_server(port=8123, reload=False, no_persist=True)
    assert calls == [("api:app", {"host": "127.0.0.1", "port": 8123, "reload": False})]
    assert os.environ["DICE_NO_PERSIST"] == "1"

def test_print_leaderboard_marks_current_player(capsys):
    entries = [
        {"rank": 1, "player": "alice", "wallet": "0x1234567890abcdef", "score": 3400},
        {"rank": 4, "player": "Unknown", "wallet": "Unknown", "score": 0},
    ]
    main.print_leaderboard(entries, "0X1234567890ABCDEF")
    out = capsys.readouterr().out
    assert "🥇" in out and "#4" in out
    assert "0x1234...cdef" in out
    assert out.count("<- you") == 1
