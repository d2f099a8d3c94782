"""Flask app - job registration, post-processing triggers and job messages."""

from typing import Tuple, Union

from flask import Flask, Response, jsonify, request

import landfall.config.settings  # noqa: F401  registers the settings tabs
from landfall.config.env import CONFIG_DIR, DEBUG, FLASK_HOST, FLASK_PORT, is_config_dir_writable
from landfall.core.logger import setup_logger
from landfall.core.queue import post_queue
from landfall.core.settings_registry import (
    ConfigurationError,
    get_settings_tab,
    serialize_tab,
    update_settings,
)
from landfall.download import orchestrator

logger = setup_logger(__name__)

SETTINGS_TAB = "postprocess"

app = Flask(__name__)

ApiResponse = Union[Response, Tuple[Response, int]]


@app.route('/api/health', methods=['GET'])
def api_health() -> ApiResponse:
    return jsonify({"status": "ok"})


@app.route('/api/jobs', methods=['GET'])
def api_jobs() -> ApiResponse:
    return jsonify(post_queue.get_status())


@app.route('/api/jobs', methods=['POST'])
def api_add_job() -> ApiResponse:
    """Register a completed download for post-processing.

    Body: {"name": ..., "inter_dir": ..., "final_dir"?: ..., "category"?: ...}
    """
    data = request.get_json(silent=True) or {}
    name = str(data.get('name') or '').strip()
    inter_dir = str(data.get('inter_dir') or '').strip()

    if not name or not inter_dir:
        return jsonify({"error": "name and inter_dir are required"}), 400

    job = post_queue.create(
        name=name,
        inter_dir=inter_dir,
        final_dir=str(data.get('final_dir') or ''),
        category=str(data.get('category') or ''),
    )
    logger.info(f"Job registered for post-processing: {job.name} ({job.job_id})")
    return jsonify({"id": job.job_id}), 201


@app.route('/api/jobs/<job_id>', methods=['GET'])
def api_job(job_id: str) -> ApiResponse:
    job = post_queue.get_task(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    return jsonify(job.to_dict())


@app.route('/api/jobs/<job_id>/messages', methods=['GET'])
def api_job_messages(job_id: str) -> ApiResponse:
    try:
        messages = post_queue.get_messages(job_id)
    except KeyError:
        return jsonify({"error": "Job not found"}), 404
    return jsonify([message.to_dict() for message in messages])


def _start(job_id: str, starter) -> ApiResponse:
    try:
        started = starter(job_id)
    except KeyError:
        return jsonify({"error": "Job not found"}), 404
    if not started:
        return jsonify({"error": "Job is already being processed"}), 409
    return jsonify({"status": "started"}), 202


@app.route('/api/jobs/<job_id>/move', methods=['POST'])
def api_move(job_id: str) -> ApiResponse:
    return _start(job_id, orchestrator.start_move_job)


@app.route('/api/jobs/<job_id>/cleanup', methods=['POST'])
def api_cleanup(job_id: str) -> ApiResponse:
    return _start(job_id, orchestrator.start_cleanup_job)


@app.route('/api/settings', methods=['GET'])
def api_settings() -> ApiResponse:
    tab = get_settings_tab(SETTINGS_TAB)
    if tab is None:
        return jsonify({"error": "Settings unavailable"}), 500
    return jsonify(serialize_tab(tab))


@app.route('/api/settings', methods=['PUT'])
def api_update_settings() -> ApiResponse:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "No data provided"}), 400
    try:
        result = update_settings(SETTINGS_TAB, data)
    except ConfigurationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(result), 200 if result["success"] else 500


if __name__ == '__main__':
    if not is_config_dir_writable():
        logger.warning(f"Config directory {CONFIG_DIR} is not writable, settings changes will not persist")
    logger.info(f"Starting landfall on {FLASK_HOST}:{FLASK_PORT}")
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=DEBUG)
