"""
Tests for the Flask server.
"""
import json
import queue
import threading

import pytest

import server
from errors import ConfigurationError
from snake_factory import SnakeFactory


SMALL_RUN = {"gridWidth": 8, "gridHeight": 8, "population": 6,
             "maxGenerations": 2, "species": "forward_only", "seed": 5}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(server, "_latest_replay", None)
    monkeypatch.setattr(server, "_run_status", dict(server._run_status))
    server.app.config["TESTING"] = True
    with server.app.test_client() as c:
        yield c
    server._stop_event.set()
    if server._pit_thread is not None:
        server._pit_thread.join(timeout=30)


class TestConfig:

    def test_defaults(self):
        cfg = server._build_cfg({})
        assert cfg["grid_width"] == server.GRID_WIDTH
        assert cfg["species"] == server.SPECIES
        assert cfg["seed"] is None

    def test_overrides(self):
        cfg = server._build_cfg(SMALL_RUN)
        assert cfg["grid_width"] == 8
        assert cfg["population"] == 6
        assert cfg["species"] == "forward_only"
        assert cfg["seed"] == 5

    def test_bad_number(self):
        with pytest.raises(ConfigurationError):
            server._build_cfg({"population": "many"})

    def test_bad_species(self):
        with pytest.raises(ConfigurationError):
            server._build_pit(server._build_cfg({"species": "boa"}), None)


class TestReplayPayload:

    def test_fields(self, rng):
        snake = SnakeFactory("forward_only", 10, 10, rng=rng).create()
        snake.survive()
        record = {"generation": 4, "fitness": snake.fitness,
                  "length": snake.length, "moves": len(snake.movements)}
        payload = server.replay_payload(snake, record)
        assert payload["generation"] == 4
        assert payload["species"] == "forward_only"
        assert payload["hatchling"] == [[p.x, p.y] for p in snake.hatchling]
        assert len(payload["movements"]) == len(snake.movements)
        assert len(payload["foodLocations"]) == len(snake.food_locations)
        json.dumps(payload)


class TestWorker:

    def test_publishes_every_generation(self, monkeypatch):
        monkeypatch.setattr(server, "_latest_replay", None)
        pit = server._build_pit(server._build_cfg(SMALL_RUN), None)
        pit.verbose = False
        out_q = queue.Queue()
        server._pit_worker(pit, 2, threading.Event(), out_q, server._run_id)

        events = [out_q.get_nowait() for _ in range(out_q.qsize())]
        assert [e["type"] for e in events] == ["generation", "generation", "done"]
        assert events[1]["generation"] == 2
        assert server._latest_replay["generation"] == 2

    def test_stop_event(self):
        pit = server._build_pit(server._build_cfg(SMALL_RUN), None)
        pit.verbose = False
        stop_evt = threading.Event()
        stop_evt.set()
        out_q = queue.Queue()
        server._pit_worker(pit, 2, stop_evt, out_q, server._run_id)
        assert pit.generation == 0
        assert out_q.get_nowait()["type"] == "done"

    def test_superseded_run_leaves_shared_state_alone(self, monkeypatch):
        monkeypatch.setattr(server, "_latest_replay", None)
        monkeypatch.setattr(server, "_run_status", dict(server._run_status, generation=0,
                                                        high_score=0, running=True))
        monkeypatch.setattr(server, "_run_id", 7)
        pit = server._build_pit(server._build_cfg(SMALL_RUN), None)
        pit.verbose = False
        out_q = queue.Queue()
        server._pit_worker(pit, 2, threading.Event(), out_q, 6)

        assert pit.generation == 2
        assert server._latest_replay is None
        assert server._run_status["generation"] == 0
        assert server._run_status["running"] is True
        assert out_q.qsize() == 3


class TestRoutes:

    def test_status(self, client):
        body = client.get("/status").get_json()
        assert "running" in body
        assert "generation" in body

    def test_replay_before_any_run(self, client):
        assert client.get("/replay").status_code == 404

    def test_start_rejects_bad_config(self, client):
        response = client.post("/start", json={"species": "cobra"})
        assert response.status_code == 400
        assert "cobra" in response.get_json()["error"]

    def test_start_rejects_tiny_grid(self, client):
        response = client.post("/start", json=dict(SMALL_RUN, gridWidth=5))
        assert response.status_code == 400
        assert "5x8" in response.get_json()["error"]
        assert server._run_status["running"] is False

    def test_start_runs_to_completion(self, client):
        response = client.post("/start", json=SMALL_RUN)
        assert response.get_json()["status"] == "started"
        server._pit_thread.join(timeout=60)

        status = client.get("/status").get_json()
        assert status["running"] is False
        assert status["generation"] == 2
        replay = client.get("/replay").get_json()
        assert replay["generation"] == 2
        assert replay["width"] == 8

    def test_stop(self, client):
        assert client.post("/stop").get_json()["status"] == "stopped"

    def test_stream(self, client, monkeypatch):
        out_q = queue.Queue()
        out_q.put({"type": "generation", "generation": 1})
        out_q.put({"type": "done", "gen": 1})
        monkeypatch.setattr(server, "_gen_queue", out_q)

        text = client.get("/stream").get_data(as_text=True)
        assert text.startswith('data: {"type": "connected"}')
        assert '"generation": 1' in text
        assert text.rstrip().endswith('data: {"type": "done", "gen": 1}')

    def test_cors_headers(self, client):
        assert client.get("/status").headers["Access-Control-Allow-Origin"] == "*"
