"""
Flask HTTP API for creating, polling and stopping cleanup jobs.
"""
from typing import Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError

from config import settings
from igcleanup.auth.cookie_manager import CookieManager
from igcleanup.errors import InvalidInput
from igcleanup.jobs.runner import JobRunner
from igcleanup.models import ACTIVE_STATUSES, CreateJobRequest, JobStatus
from igcleanup.storage.job_store import JobStore
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(store: Optional[JobStore] = None, runner: Optional[JobRunner] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        store: JobStore (defaults to one at settings.IGCLEANUP_STORE_PATH)
        runner: JobRunner executing submitted jobs (defaults to one over store)

    Returns:
        Configured Flask app
    """
    store = store or JobStore(settings.IGCLEANUP_STORE_PATH)
    runner = runner or JobRunner(store)

    app = Flask(__name__)
    app.config["JOB_STORE"] = store
    app.config["JOB_RUNNER"] = runner

    @app.post("/api/jobs")
    def create_job():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"message": "Request body must be a JSON object"}), 400

        try:
            body = CreateJobRequest.model_validate(payload)
        except ValidationError as e:
            error = e.errors()[0]
            return (
                jsonify(
                    {
                        "message": error["msg"],
                        "field": ".".join(str(part) for part in error["loc"]),
                    }
                ),
                400,
            )

        # Remember the payload even if it turns out to be unusable
        store.set_setting(settings.COOKIES_SETTING_KEY, body.cookies)

        try:
            CookieManager.parse(body.cookies)
        except InvalidInput as e:
            logger.info(f"Rejected job request: {e.message}")
            return jsonify({"message": e.message, "field": e.field}), 400

        job = store.create_job(speed=body.effective_speed, target_type=body.target_type)
        runner.submit(job, body.cookies)

        return jsonify(job.to_response()), 201

    @app.get("/api/jobs/<int:job_id>")
    def get_job(job_id: int):
        job = store.get_job(job_id)
        if job is None:
            return jsonify({"message": "Job not found"}), 404

        return jsonify(job.to_response())

    @app.post("/api/jobs/<int:job_id>/stop")
    def stop_job(job_id: int):
        job = store.get_job(job_id)
        if job is None:
            return jsonify({"message": "Job not found"}), 404

        if job.status in ACTIVE_STATUSES:
            runner.stop_job(job_id)
            job = store.transition(job_id, JobStatus.STOPPED, ACTIVE_STATUSES)
            logger.info(f"Job {job_id} stop requested (status now {job.status.value})")

        return jsonify(job.to_response())

    @app.get("/api/settings/cookies")
    def get_cookies():
        return jsonify({"cookies": store.get_setting(settings.COOKIES_SETTING_KEY) or ""})

    @app.post("/api/settings/cookies/clear")
    def clear_cookies():
        store.set_setting(settings.COOKIES_SETTING_KEY, "")
        return jsonify({"success": True})

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Unhandled error serving {request.path}: {error}")
        return jsonify({"message": "Internal server error"}), 500

    return app
