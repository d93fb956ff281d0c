import pytest
import requests
from leaderboard_client import LeaderboardClient, LeaderboardUnavailable, parse_leaderboard

class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)
    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
    def _reply(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response
    def get(self, url, **kwargs):
        return self._reply("GET", url, **kwargs)
    def post(self, url, **kwargs):
        return self._reply("POST", url, **kwargs)

def make_client(session, submit_url="https://scores.example/api/save-score"):
    return LeaderboardClient(
        leaderboard_url="https://board.example/api/leaderboard",
        submit_url=submit_url,
        game_id="224",
        limit=10,
        session=session,
    )

# ---------- leaderboard read ----------
def test_null_data_reads_as_empty_board():
    client = make_client(FakeSession(FakeResponse(payload={"data": None})))
    assert client.fetch_leaderboard() == []

def test_entries_are_mapped_with_defaults():
    rows = [
        {"rank": 1, "username": "alice", "walletAddress": "0xAAA", "score": 3400},
        {"rank": "2", "score": "1500"},
        "garbage",
        {"username": "carol", "walletAddress": "0xCCC", "score": "lots"},
    ]
    client = make_client(FakeSession(FakeResponse(payload={"data": rows})))
    board = client.fetch_leaderboard()
    assert [(e.rank, e.player, e.wallet, e.score) for e in board] == [
        (1, "alice", "0xAAA", 3400),
        (2, "Unknown", "Unknown", 1500),
        (4, "carol", "0xCCC", 0),
    ]

def test_request_carries_board_query():
    session = FakeSession(FakeResponse(payload={"data": []}))
    make_client(session).fetch_leaderboard()
    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "https://board.example/api/leaderboard"
    assert kwargs["params"] == {"page": 1, "limit": 10, "gameId": "224", "sortBy": "scores", "sortOrder": "desc"}
    assert kwargs["headers"]["User-Agent"]

@pytest.mark.parametrize("payload", [None, 42, "nope", {"data": {"rows": []}}, {}])
def test_malformed_payloads_read_as_empty(payload):
    assert parse_leaderboard(payload) == []

def test_bare_list_is_accepted():
    board = parse_leaderboard([{"rank": 0, "score": -10}])
    assert board[0].rank == 1
    assert board[0].score == 0

def test_non_json_body_reads_as_empty():
    client = make_client(FakeSession(FakeResponse(payload=ValueError("bad json"), text="<html>")))
    assert client.fetch_leaderboard() == []

def test_http_error_is_reported():
    client = make_client(FakeSession(FakeResponse(status_code=503, payload={}, text="down")))
    with pytest.raises(LeaderboardUnavailable):
        client.fetch_leaderboard()

def test_network_error_is_reported():
    client = make_client(FakeSession(error=requests.ConnectionError("refused")))
    with pytest.raises(LeaderboardUnavailable):
        client.fetch_leaderboard()

# ---------- score submission ----------
def test_submit_success():
    session = FakeSession(FakeResponse(payload={"success": True, "transactionHash": "0xdeadbeef"}))
    res = make_client(session).submit_score("0xabc", 1300)
    assert res.success
    assert res.transaction_id == "0xdeadbeef"
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "https://scores.example/api/save-score"
    assert kwargs["json"] == {"playerAddress": "0xabc", "scoreAmount": 1300}

def test_submit_failure_body():
    session = FakeSession(FakeResponse(status_code=400, payload={"success": False, "error": "nonce too low"}))
    res = make_client(session).submit_score("0xabc", 100)
    assert not res.success
    assert res.error == "nonce too low"

@pytest.mark.parametrize("response", [
    FakeResponse(payload={"success": True}),
    FakeResponse(payload={"ok": 1}),
    FakeResponse(payload=["success"]),
    FakeResponse(status_code=500, payload={"success": True, "transactionHash": "0x1"}),
    FakeResponse(status_code=502, payload=ValueError("bad json"), text="Bad Gateway"),
])
def test_submit_malformed_responses_fail(response):
    res = make_client(FakeSession(response)).submit_score("0xabc", 100)
    assert not res.success
    assert res.error

def test_submit_network_error_fails():
    res = make_client(FakeSession(error=requests.Timeout("slow"))).submit_score("0xabc", 100)
    assert not res.success

def test_submit_not_configured():
    session = FakeSession(FakeResponse(payload={}))
    client = make_client(session, submit_url=None)
    client.submit_url = None
    res = client.submit_score("0xabc", 100)
    assert not res.success
    assert session.calls == []

def test_out_of_range_rank_falls_back_to_position():
    board = parse_leaderboard({"data": [{"rank": 1e400, "score": 5}, {"rank": float("nan"), "score": 7}]})
    assert [(e.rank, e.score) for e in board] == [(1, 5), (2, 7)]

def test_non_text_names_read_as_unknown():
    board = parse_leaderboard([{"username": {"first": "al"}, "walletAddress": ["0xAAA"], "score": 1}])
    assert (board[0].player, board[0].wallet) == ("Unknown", "Unknown")
