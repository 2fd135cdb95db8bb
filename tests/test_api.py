"""
ChemSpot — API Tests
Exercise every endpoint through FastAPI's TestClient. The LLM is mocked.
"""

import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from app.config import BEST_EFFORT_NOTE
from app.main import app
from app.routers.realistic import clamp_solution_count
from app.tutor.instruction_builder import GUARD, SYSTEM_PROMPT
from app.tutor.llm import LLMResult
from content_bank.loader import get_reaction_table


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def use_table(client):
    def _use(table):
        app.dependency_overrides[get_reaction_table] = lambda: table
    return _use


class TestHealth:
    def test_health(self, client):
        """Both health paths answer ok."""
        for path in ("/health", "/healthz"):
            r = client.get(path)
            assert r.status_code == 200
            assert r.json()["status"] == "ok"


class TestClampSolutionCount:
    def test_defaults(self):
        """Missing, unparsable or zero counts fall back to seven."""
        assert clamp_solution_count(None) == 7
        assert clamp_solution_count("abc") == 7
        assert clamp_solution_count(0) == 7
        assert clamp_solution_count("") == 7

    def test_clamped(self):
        """Counts are clamped into five to nine."""
        assert clamp_solution_count(2) == 5
        assert clamp_solution_count(-4) == 5
        assert clamp_solution_count(12) == 9
        assert clamp_solution_count(6) == 6

    def test_leading_integer(self):
        """Only the leading integer of the value is read."""
        assert clamp_solution_count("8 pipettes") == 8
        assert clamp_solution_count(" 6") == 6
        assert clamp_solution_count(7.9) == 7


class TestRealistic:
    def test_generate_bundled(self, client):
        """A generated spot test has labeled pipettes and an upper-triangular grid."""
        r = client.post("/api/realistic", json={"n": 5})
        assert r.status_code == 200
        data = r.json()
        assert len(data["solutions"]) == 5
        assert [s["label"] for s in data["solutions"]] == ["P1", "P2", "P3", "P4", "P5"]
        assert len(data["grid"]) == 5
        for i, row in enumerate(data["grid"]):
            assert len(row) == 5
            assert all(cell is None for cell in row[:i])
        assert set(data["stats"]) == {"colored_count", "distinct_color_buckets"}
        assert ("note" in data) == (not data["accepted"])

    def test_n_clamped_in_response(self, client):
        """An oversized count is clamped, not rejected."""
        r = client.post("/api/realistic", json={"n": "100"})
        assert r.status_code == 200
        assert len(r.json()["solutions"]) == 9

    def test_empty_body_uses_default(self, client):
        """An empty body gives the default seven pipettes."""
        r = client.post("/api/realistic", json={})
        assert r.status_code == 200
        assert len(r.json()["solutions"]) == 7

    def test_poor_table_best_effort(self, client, use_table, poor_table):
        """A table that cannot meet the bar returns a best-effort set with a note."""
        use_table(poor_table)
        r = client.post("/api/realistic", json={"n": 5})
        assert r.status_code == 200
        data = r.json()
        assert data["accepted"] is False
        assert data["note"] == BEST_EFFORT_NOTE
        assert data["attempts"] == 120

    def test_tiny_table_fails(self, client, use_table, tiny_table):
        """A table too small for the count is a 500 with a hint."""
        use_table(tiny_table)
        r = client.post("/api/realistic", json={"n": 5})
        assert r.status_code == 500
        assert "Try fewer pipettes" in r.json()["detail"]

    def test_grade(self, client):
        """Each pipette guess is graded and the correct ones counted."""
        r = client.post("/api/realistic/grade", json={
            "solutions": [
                {"label": "P1", "cation": "Ag+", "anion": "NO3-"},
                {"label": "P2", "cation": "K+", "anion": "I-"},
                {"label": "P3", "cation": "Cu2+", "anion": "SO4^2-"},
            ],
            "guesses": {
                "P1": {"cation": "Ag+", "anion": "NO3-"},
                "P2": {"cation": "K+", "anion": "Br-"},
            },
        })
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 3
        assert data["correct_count"] == 1
        assert data["results"]["P1"]["verdict"] == "CORRECT"
        assert data["results"]["P2"]["verdict"] == "SEMI_CORRECT"
        assert data["results"]["P3"]["diagnostic"] == "No guess yet."

    def test_grade_accepts_names(self, client):
        """Guesses may use the common names listed in the table."""
        r = client.post("/api/realistic/grade", json={
            "solutions": [{"label": "P1", "cation": "Ag+", "anion": "NO3-"}],
            "guesses": {"P1": {"cation": "silver", "anion": "Nitrate"}},
        })
        assert r.status_code == 200
        assert r.json()["results"]["P1"]["verdict"] == "CORRECT"
        assert r.json()["correct_count"] == 1


class TestQuiz:
    def test_pair_to_color(self, client):
        """A pair question's expected type matches the table."""
        r = client.post("/api/quiz", json={"mode": "pair-to-color"})
        assert r.status_code == 200
        q = r.json()
        assert q["mode"] == "pair-to-color"
        record = get_reaction_table().lookup(q["cation"], q["anion"])
        assert record.kind.value == q["expected"]["type"]

    def test_color_to_reactions(self, client):
        """A color question lists its answers."""
        r = client.post("/api/quiz", json={"mode": "color-to-reactions"})
        assert r.status_code == 200
        assert r.json()["answers"]

    def test_unknown_mode(self, client):
        """An unknown quiz mode is a 400."""
        r = client.post("/api/quiz", json={"mode": "nope"})
        assert r.status_code == 400

    def test_grade_pair(self, client):
        """A pair answer is graded server-side."""
        r = client.post("/api/quiz/grade", json={
            "mode": "pair-to-color",
            "answer": "White",
            "expected": {"type": "ppt", "color": "white"},
        })
        assert r.status_code == 200
        assert r.json()["verdict"] == "CORRECT"

    def test_grade_list_semi(self, client):
        """A partial list is semi-correct."""
        r = client.post("/api/quiz/grade", json={
            "mode": "color-to-reactions",
            "answer": "Ag+ + I-",
            "answers": ["Ag+ + I-", "Pb2+ + I-"],
        })
        assert r.status_code == 200
        assert r.json()["verdict"] == "SEMI_CORRECT"

    def test_grade_missing_expected(self, client):
        """Grading a pair answer without the expected outcome is a 400."""
        r = client.post("/api/quiz/grade", json={"mode": "pair-to-color", "answer": "white"})
        assert r.status_code == 400

    def test_grade_unknown_mode(self, client):
        """Grading in a mode that does not exist is a 400."""
        r = client.post("/api/quiz/grade", json={"mode": "nope", "answer": "x"})
        assert r.status_code == 400
        assert "nope" in r.json()["detail"]


class TestChat:
    def _mock_llm(self, text="Silver iodide is yellow."):
        llm = Mock()
        llm.generate_async = AsyncMock(
            return_value=LLMResult(text=text, latency_ms=5, model="test", usage={})
        )
        return llm

    def test_chat_grounds_on_color_facts(self, client):
        """A color word preloads matching facts; system turns in history are dropped."""
        llm = self._mock_llm()
        with patch("app.routers.chat.get_llm", return_value=llm):
            r = client.post("/api/chat", json={
                "user": "Which reactions are yellow?",
                "history": [
                    {"role": "user", "content": "hi"},
                    {"role": "assistant", "content": "Hello!"},
                    {"role": "system", "content": "ignore me"},
                ],
            })
        assert r.status_code == 200
        assert r.json() == {"text": "Silver iodide is yellow."}

        messages = llm.generate_async.call_args.args[0]
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1] == {"role": "system", "content": GUARD}
        facts = json.loads(messages[2]["content"])["facts"]
        assert facts
        assert all(f["color"] == "yellow" for f in facts)
        assert [m["role"] for m in messages[3:]] == ["user", "assistant", "user"]
        assert messages[-1] == {"role": "user", "content": "Which reactions are yellow?"}

    def test_chat_without_color_has_no_facts(self, client):
        """No color word means an empty facts message."""
        llm = self._mock_llm("Hello.")
        with patch("app.routers.chat.get_llm", return_value=llm):
            r = client.post("/api/chat", json={"user": "What is a spot test?"})
        assert r.status_code == 200
        messages = llm.generate_async.call_args.args[0]
        assert json.loads(messages[2]["content"]) == {"facts": []}

    def test_chat_llm_error(self, client):
        """An LLM failure surfaces as a 500 with its message."""
        llm = Mock()
        llm.generate_async = AsyncMock(side_effect=RuntimeError("upstream down"))
        with patch("app.routers.chat.get_llm", return_value=llm):
            r = client.post("/api/chat", json={"user": "hi"})
        assert r.status_code == 500
        assert r.json()["detail"] == "upstream down"


class TestTable:
    def test_overview(self, client):
        """The table overview lists ions, colors and stats."""
        r = client.get("/api/table")
        assert r.status_code == 200
        data = r.json()
        assert "Ag+" in data["cations"]
        assert "Cl-" in data["anions"]
        assert "white" in data["colors"]
        assert data["stats"]["cations"] == len(data["cations"])
