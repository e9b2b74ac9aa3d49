from flask import Blueprint, current_app, jsonify, request

from .sessions import UnknownSessionError
from .store import UnknownRunError

bp = Blueprint('main', __name__)

API_VERSION = 1


def _sessions():
    return current_app.extensions["genesim.sessions"]


def _store():
    return current_app.extensions["genesim.store"]


def _error(message, status):
    return jsonify({"status": "error", "message": message}), status


def _parse_flag(raw_value):
    if isinstance(raw_value, bool):
        return raw_value
    if isinstance(raw_value, str):
        lowered = raw_value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
    raise ValueError("paused must be a boolean")


@bp.before_app_request
def _evict_idle_sessions():
    evicted = _sessions().evict_idle()
    if evicted:
        current_app.logger.info("Disconnected %d idle session(s)", len(evicted))


@bp.errorhandler(UnknownSessionError)
def _unknown_session(exc):
    return _error(f"unknown session {exc.args[0]}", 404)


@bp.errorhandler(UnknownRunError)
def _unknown_run(exc):
    return _error(f"unknown simulation run {exc.args[0]}", 404)


@bp.route('/')
def index():
    return jsonify({"service": "genesim", "apiVersion": API_VERSION})


@bp.route('/api/simulations/start', methods=['POST'])
def simulation_start():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return _error("configuration must be a JSON object", 400)
    name = payload.pop("name", None)

    try:
        session_id = _sessions().start(payload, name=name, store=_store())
    except ValueError as exc:
        current_app.logger.warning("Rejected simulation config %s: %s", payload, exc)
        return _error(str(exc), 400)

    current_app.logger.info("Started simulation session %s with config %s", session_id, payload)
    snapshot = _sessions().snapshot(session_id)
    return jsonify({"sessionId": session_id, "snapshot": snapshot.toDict()})


@bp.route('/api/simulations/<session_id>/step', methods=['POST'])
def simulation_step(session_id):
    snapshot = _sessions().step(session_id)
    return jsonify(snapshot.toDict())


@bp.route('/api/simulations/<session_id>', methods=['GET'])
def simulation_state(session_id):
    snapshot = _sessions().snapshot(session_id)
    return jsonify(snapshot.toDict())


@bp.route('/api/simulations/<session_id>', methods=['DELETE'])
def simulation_stop(session_id):
    _sessions().stop(session_id)
    return jsonify({"status": "ok"})


@bp.route('/api/simulations/<session_id>/pause', methods=['POST'])
def simulation_pause(session_id):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return _error("pause command must be a JSON object", 400)
    try:
        paused = _parse_flag(payload.get("paused"))
    except ValueError as exc:
        return _error(str(exc), 400)

    _sessions().toggle_pause(session_id, paused)
    return jsonify({"status": "ok", "paused": paused})


@bp.route('/api/simulations/<session_id>/speed', methods=['POST'])
def simulation_speed(session_id):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return _error("speed command must be a JSON object", 400)
    speed = payload.get("speed")
    try:
        _sessions().set_speed(session_id, speed)
    except ValueError as exc:
        current_app.logger.warning("Rejected speed %r for session %s", speed, session_id)
        return _error(str(exc), 400)

    return jsonify({"status": "ok", "speed": float(speed)})


@bp.route('/api/runs', methods=['GET'])
def runs_list():
    try:
        return jsonify(_store().list_simulations())
    except OSError as exc:
        current_app.logger.exception("Failed to read simulation runs")
        return _error(str(exc), 500)


@bp.route('/api/runs', methods=['POST'])
def runs_save():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return _error("run must be a JSON object", 400)
    name = (payload.get("name") or "").strip()
    if not name:
        return _error("name is required", 400)

    try:
        run_id = _store().save_simulation(name, payload.get("data") or {})
    except OSError as exc:
        current_app.logger.exception("Failed to persist simulation run")
        return _error(str(exc), 500)
    return jsonify({"id": run_id})


@bp.route('/api/runs/<int:run_id>', methods=['GET'])
def runs_detail(run_id):
    try:
        return jsonify(_store().simulation_details(run_id))
    except OSError as exc:
        current_app.logger.exception("Failed to read simulation run %s", run_id)
        return _error(str(exc), 500)


@bp.route('/api/generations/<int:generation_id>/organisms', methods=['GET'])
def generation_organisms(generation_id):
    limit = request.args.get("limit", default=10, type=int)
    try:
        return jsonify(_store().best_organisms(generation_id, limit=limit))
    except OSError as exc:
        current_app.logger.exception("Failed to read organisms for generation %s", generation_id)
        return _error(str(exc), 500)
