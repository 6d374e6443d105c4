#!/usr/bin/env python3
"""
Command Center Dashboard Server
-------------------------------
Serves the single-page task dashboard and wires its buttons to the task store.

Usage:
    python dashboard_server.py                       # local storage backend
    python dashboard_server.py --backend remote      # proxy through the task API
    python dashboard_server.py --config config/command_center.yaml

Routes:
    GET  /                        → dashboard page (tasks, timeline, mission)
    POST /tasks                   → form: { text, priority }
    POST /tasks/<id>/start        → move to in-progress
    POST /tasks/<id>/complete     → move to completed
    POST /tasks/<id>/delete       → remove
    GET  /api/board               → JSON board view
    GET  /health                  → JSON: { status, backend }
"""

import argparse
import logging
import sys

from flask import Flask, jsonify, redirect, render_template, request, url_for

from command_center.adapters import LocalAdapter, RemoteAdapter, PersistenceAdapter
from command_center.client import ApiClient
from command_center.config import DashboardConfig
from command_center.mission import MISSION_HTML, TABS, active_tab, format_clock
from command_center.render import build_board
from command_center.schema import Priority
from command_center.storage import LocalStorage
from command_center.store import TaskStore

logger = logging.getLogger("command_center.server")


def create_adapter(cfg: DashboardConfig) -> PersistenceAdapter:
    """Build the persistence backend chosen by the config."""
    if cfg.backend == "remote":
        client = ApiClient(cfg.api_base, api_key=cfg.api_key, timeout=cfg.request_timeout)
        return RemoteAdapter(client)
    return LocalAdapter(LocalStorage(cfg.storage_path), key=cfg.storage_key)


def create_app(cfg: DashboardConfig = None, store: TaskStore = None) -> Flask:
    """Create the Flask app with one task store for its lifetime."""
    cfg = cfg or DashboardConfig.load()
    if store is None:
        store = TaskStore(create_adapter(cfg))
        store.load()

    app = Flask(__name__)
    app.config["DASHBOARD"] = cfg
    app.config["STORE"] = store

    @app.route("/")
    def index():
        if store.adapter.refetch_after_mutation:
            store.refresh()
        board = build_board(store)
        return render_template(
            "dashboard.html",
            board=board,
            tabs=TABS,
            active=active_tab(request.args.get("tab")),
            mission=MISSION_HTML,
            clock=format_clock(),
            priorities=[p.value for p in Priority],
        )

    @app.route("/tasks", methods=["POST"])
    def add_task():
        text = request.form.get("text", "").strip()
        if text:
            store.add_task(text, Priority.from_str(request.form.get("priority", "medium")))
        return redirect(url_for("index"))

    @app.route("/tasks/<int:task_id>/start", methods=["POST"])
    def start_task(task_id):
        store.start_task(task_id)
        return redirect(url_for("index"))

    @app.route("/tasks/<int:task_id>/complete", methods=["POST"])
    def complete_task(task_id):
        store.complete_task(task_id)
        return redirect(url_for("index"))

    @app.route("/tasks/<int:task_id>/delete", methods=["POST"])
    def delete_task(task_id):
        store.delete_task(task_id)
        return redirect(url_for("index"))

    @app.route("/api/board")
    def api_board():
        data = build_board(store).to_dict()
        data["backend"] = store.adapter.name
        return jsonify(data)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "backend": store.adapter.name})

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="Command Center Dashboard Server")
    parser.add_argument("--host", default="127.0.0.1",
                        help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--config", help="Path to command_center.yaml")
    parser.add_argument("--backend", choices=["local", "remote"],
                        help="Persistence backend (overrides config)")
    args = parser.parse_args(argv)

    cfg = DashboardConfig.load(args.config)
    if args.backend:
        cfg.backend = args.backend
    logging.basicConfig(
        level=getattr(logging, str(cfg.log_level).upper(), logging.INFO),
        format="%(asctime)s [command-center] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = create_app(cfg)
    logger.info(f"Serving on http://{args.host}:{args.port} (backend={cfg.backend})")
    app.run(host=args.host, port=args.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
