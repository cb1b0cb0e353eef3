"""
Genetic Snake Server  –  Flask + Server-Sent Events
===================================================

Endpoints:
  POST /start        Start (or restart) evolution with a JSON config body
  POST /stop         Stop the running evolution after the current generation
  GET  /stream       SSE stream – one event per generation with the best
                     snake's replay
  GET  /status       Current run state as JSON
  GET  /replay       Latest best-snake replay as JSON

Run:
  python server.py
  # → http://localhost:5000
"""

import threading
import queue
import json

import numpy as np
from flask import Flask, Response, request, jsonify

from errors import SnakeEvolutionError, ConfigurationError
from snake_factory import SnakeFactory
from snake_pit import SnakePit
from config import (
    GRID_WIDTH, GRID_HEIGHT, POPULATION, MAX_GENERATIONS,
    MUTATION_RATE, SPECIES, ACTIVATION, WORKERS,
)

# ──────────────────────────────────────────────────────────────────────────────
app = Flask(__name__)

# Global run state
_pit_thread:  threading.Thread | None = None
_stop_event   = threading.Event()
_gen_queue    = queue.Queue(maxsize=200)   # holds dicts to stream
_latest_replay = None
_run_status   = {
    "running":    False,
    "generation": 0,
    "max_gen":    0,
    "high_score": 0,
    "error":      None,
    "cfg":        {},
}
_status_lock  = threading.Lock()
_run_id       = 0                           # bumped by every /start


# ──────────────────────────────────────────────────────────────────────────────
# CORS helper – allow a browser front end on any origin to call us
# ──────────────────────────────────────────────────────────────────────────────

@app.after_request
def add_cors(response):
    response.headers["Access-Control-Allow-Origin"]  = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response

@app.route("/", methods=["OPTIONS"])
@app.route("/<path:p>", methods=["OPTIONS"])
def preflight(p=""):
    return Response(status=200)


@app.errorhandler(ConfigurationError)
def bad_config(err):
    return jsonify({"status": "error", "error": str(err)}), 400


# ──────────────────────────────────────────────────────────────────────────────
# Evolution thread
# ──────────────────────────────────────────────────────────────────────────────

def _build_cfg(data: dict) -> dict:
    """Merge request JSON with defaults."""
    seed = data.get("seed")
    try:
        return {
            "grid_width":      int(data.get("gridWidth",       GRID_WIDTH)),
            "grid_height":     int(data.get("gridHeight",      GRID_HEIGHT)),
            "population":      int(data.get("population",      POPULATION)),
            "max_generations": int(data.get("maxGenerations",  MAX_GENERATIONS)),
            "mutation_rate":   float(data.get("mutationRate",  MUTATION_RATE)),
            "species":         str(data.get("species",         SPECIES)),
            "activation":      str(data.get("activation",      ACTIVATION)),
            "workers":         int(data.get("workers",         WORKERS)),
            "seed":            None if seed is None else int(seed),
        }
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config value: {exc}") from exc


def _build_pit(cfg: dict, on_generation) -> SnakePit:
    rng = np.random.default_rng(cfg["seed"])
    factory = SnakeFactory(cfg["species"], cfg["grid_width"], cfg["grid_height"],
                           cfg["activation"], rng)
    return SnakePit(
        factory,
        population_size      = cfg["population"],
        mutation_probability = cfg["mutation_rate"],
        rng                  = rng,
        on_generation        = on_generation,
        workers              = cfg["workers"],
    )


def replay_payload(snake, record: dict) -> dict:
    """JSON-ready replay of one snake: enough to rebuild every frame."""
    return {
        "generation":    record["generation"],
        "fitness":       record["fitness"],
        "length":        record["length"],
        "moves":         record["moves"],
        "state":         snake.state.value,
        "species":       snake.species.name,
        "width":         snake.width,
        "height":        snake.height,
        "hatchling":     [[p.x, p.y] for p in snake.hatchling],
        "movements":     [[m.dx, m.dy] for m in snake.movements],
        "foodLocations": [[p.x, p.y] for p in snake.food_locations],
    }


def _publish(out_q: queue.Queue, payload: dict):
    # Non-blocking put; drop oldest frame if queue full
    if out_q.full():
        try:
            out_q.get_nowait()
        except queue.Empty:
            pass
    out_q.put(payload)


def _pit_worker(pit: SnakePit, max_generations: int,
                stop_evt: threading.Event, out_q: queue.Queue, run_id: int):
    """
    Run the pit in a background thread; push each generation into the queue.
    The shared run status and latest replay are only written while `run_id`
    is still the current run, so a worker outliving a restart leaves the new
    run's state alone.
    """

    def on_gen(record, pit):
        global _latest_replay
        replay = replay_payload(pit.animation_snake, record)
        with _status_lock:
            if run_id != _run_id:
                return
            _run_status["generation"] = record["generation"]
            _run_status["high_score"] = pit.high_score
            _latest_replay = replay
        _publish(out_q, {"type": "generation", "maxGen": max_generations, **replay})

    pit.on_generation = on_gen
    with _status_lock:
        if run_id == _run_id:
            _run_status["running"] = True
            _run_status["error"]   = None

    try:
        pit.run(max_generations, should_stop=stop_evt.is_set)
    except SnakeEvolutionError as exc:
        with _status_lock:
            if run_id == _run_id:
                _run_status["error"] = str(exc)
        raise
    finally:
        with _status_lock:
            if run_id == _run_id:
                _run_status["running"] = False
        out_q.put({"type": "done", "gen": pit.generation})


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@app.route("/start", methods=["POST"])
def start():
    global _pit_thread, _stop_event, _gen_queue, _latest_replay, _run_id

    cfg = _build_cfg(request.get_json(force=True, silent=True) or {})
    # raises ConfigurationError (→ 400) before anything is stopped
    pit = _build_pit(cfg, on_generation=None)

    # Stop any running evolution
    _stop_event.set()
    if _pit_thread and _pit_thread.is_alive():
        _pit_thread.join(timeout=3)

    # Reset
    _stop_event = threading.Event()
    _gen_queue  = queue.Queue(maxsize=200)
    with _status_lock:
        _run_id += 1
        _latest_replay = None
        _run_status["generation"] = 0
        _run_status["high_score"] = 0
        _run_status["running"]    = False
        _run_status["cfg"]        = cfg
        _run_status["max_gen"]    = cfg["max_generations"]

    _pit_thread = threading.Thread(
        target=_pit_worker,
        args=(pit, cfg["max_generations"], _stop_event, _gen_queue, _run_id),
        daemon=True,
    )
    _pit_thread.start()
    return jsonify({"status": "started", "cfg": cfg})


@app.route("/stop", methods=["POST"])
def stop():
    _stop_event.set()
    return jsonify({"status": "stopped"})


@app.route("/status", methods=["GET"])
def status():
    with _status_lock:
        return jsonify(dict(_run_status))


@app.route("/replay", methods=["GET"])
def replay():
    with _status_lock:
        latest = _latest_replay
    if latest is None:
        return jsonify({"status": "empty"}), 404
    return jsonify(latest)


@app.route("/stream", methods=["GET"])
def stream():
    """SSE endpoint – browser subscribes and receives each generation as an event."""
    out_q = _gen_queue

    def event_gen():
        # Send a hello so the browser knows it's connected
        yield "data: {\"type\": \"connected\"}\n\n"

        while True:
            try:
                payload = out_q.get(timeout=1)
                yield f"data: {json.dumps(payload)}\n\n"
                if payload.get("type") == "done":
                    break
            except queue.Empty:
                # Keep-alive ping
                yield "data: {\"type\": \"ping\"}\n\n"

    return Response(
        event_gen(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",    # disable nginx buffering if behind proxy
        },
    )


# ──────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 50)
    print("  Genetic Snake Server  →  http://localhost:5000")
    print("  SSE stream           →  http://localhost:5000/stream")
    print("=" * 50)
    app.run(host="0.0.0.0", port=5000, threaded=True, debug=False)
