# application.py
import logging
import os
from datetime import datetime, time, timedelta

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from timeline.layout import Interval, place_intervals
from timeline.day_view import layout_day
from timeline.utils import (
    parse_date,
    resolve_timezone,
    time_to_minutes,
    validate_interval_list,
    validate_shift_records,
    validate_shift_window,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="[%(asctime)s] %(levelname)s in %(module)s: %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "shift-timeline-backend"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",  # Local development
    "http://127.0.0.1:5173",  # Local development (alternative)
    "http://localhost:3000",  # Common frontend port
    "http://127.0.0.1:3000",  # Common frontend port (alternative)
]


def _cors_origins():
    extra = os.environ.get("TIMELINE_CORS_ORIGINS", "")
    return DEFAULT_CORS_ORIGINS + [o.strip() for o in extra.split(",") if o.strip()]


def _error(message, status=400):
    return jsonify({"success": False, "message": message}), status


def create_app(config=None):
    """Create the Flask application serving timeline layouts."""
    application = Flask(__name__)

    # Security and performance configuration
    application.config.update(
        MAX_CONTENT_LENGTH=1 * 1024 * 1024,  # 1MB max request size
        SESSION_COOKIE_SECURE=True,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
    )
    if config:
        application.config.update(config)

    CORS(application, origins=_cors_origins())
    logger.info("Flask application instance created and CORS enabled.")

    # --- Security Headers Middleware ---
    @application.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response

    # --- Global Error Handlers ---
    @application.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Return JSON instead of HTML for HTTP errors."""
        return (
            jsonify(
                {
                    "success": False,
                    "error": e.name,
                    "message": e.description,
                    "code": e.code,
                }
            ),
            e.code,
        )

    @application.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle unexpected exceptions."""
        if isinstance(e, HTTPException):
            return e

        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return (
            jsonify(
                {
                    "success": False,
                    "error": "Internal Server Error",
                    "message": "An unexpected error occurred.",
                }
            ),
            500,
        )

    @application.route("/")
    def health_check():
        return jsonify({"status": "ok", "service": SERVICE_NAME}), 200

    # --- API Endpoints ---
    @application.route("/api/timeline/lanes", methods=["POST"])
    def handle_lanes_request():
        request_id = id(request)
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Request body empty/not JSON.")

        raw_intervals = data.get("intervals")
        is_valid, error_msg = validate_interval_list(raw_intervals)
        if not is_valid:
            logger.info(f"[{request_id}] Rejected lanes request: {error_msg}")
            return _error(error_msg)

        intervals = [
            Interval(item["id"], item["startMinute"], item["endMinute"])
            for item in raw_intervals
        ]
        placements, cluster_count = place_intervals(intervals)
        logger.info(
            f"[{request_id}] Assigned lanes for {len(intervals)} intervals "
            f"in {cluster_count} clusters"
        )
        return (
            jsonify(
                {
                    "success": True,
                    "placements": {
                        interval_id: placement.to_dict()
                        for interval_id, placement in placements.items()
                    },
                    "clusterCount": cluster_count,
                }
            ),
            200,
        )

    @application.route("/api/timeline/day", methods=["POST"])
    def handle_day_request():
        request_id = id(request)
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Request body empty/not JSON.")

        day = parse_date(data.get("date"))
        if day is None:
            return _error("date must be a YYYY-MM-DD string.")
        tz, tz_error = resolve_timezone(data.get("timezone"))
        if tz_error:
            return _error(tz_error)
        shifts = data.get("shifts")
        is_valid, error_msg = validate_shift_records(shifts)
        if not is_valid:
            logger.info(f"[{request_id}] Rejected day request: {error_msg}")
            return _error(error_msg)

        placements, blocks = layout_day(shifts, day, tz)
        return (
            jsonify(
                {
                    "success": True,
                    "date": day.isoformat(),
                    "placements": {
                        shift_id: placement.to_dict()
                        for shift_id, placement in placements.items()
                    },
                    "blocks": blocks,
                }
            ),
            200,
        )

    @application.route("/api/shifts/validate", methods=["POST"])
    def handle_shift_validation():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Request body empty/not JSON.")

        day = parse_date(data.get("date"))
        if day is None:
            return _error("date must be a YYYY-MM-DD string.")
        tz, tz_error = resolve_timezone(data.get("timezone"))
        if tz_error:
            return _error(tz_error)
        start_time = data.get("startTime")
        end_time = data.get("endTime")
        is_valid, error_msg = validate_shift_window(start_time, end_time)
        if not is_valid:
            return _error(error_msg)

        midnight = datetime.combine(day, time.min, tzinfo=tz)
        starts_at = midnight + timedelta(minutes=time_to_minutes(start_time))
        ends_at = midnight + timedelta(minutes=time_to_minutes(end_time))
        return (
            jsonify(
                {
                    "success": True,
                    "startsAt": starts_at.isoformat(),
                    "endsAt": ends_at.isoformat(),
                }
            ),
            200,
        )

    return application


application = create_app()


# --- Application Entry Point ---
if __name__ == "__main__":
    logger.info("Starting Flask development server...")
    application.run(debug=True, host="0.0.0.0", port=5000)
