"""
API gateway: combines the auth and events blueprints.
This is the entrypoint for development and deployment.
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from campus_events.auth_service.routes import auth_bp
from campus_events.config import Settings, load_settings
from campus_events.events_service.routes import events_bp

# Basic console logging during API requests
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="[%(levelname)s] %(asctime)s - %(message)s",
)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        settings (Settings, optional): Defaults to load_settings().

    Returns:
        Flask: The configured Flask application.
    """
    app = Flask(__name__)
    app.config["SETTINGS"] = settings or load_settings()

    CORS(app, resources={
        r"/api/*": {"origins": list(app.config["SETTINGS"].cors_origins)},
        r"/health": {"origins": "*"},
    }, methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"])

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(events_bp, url_prefix="/api/events")
    logging.info("All blueprints registered successfully.")

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"message": "Campus Events API is running"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    # --- ERROR HANDLERS ---
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"success": False, "message": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"success": False, "message": "Route not found"}), 404

    @app.errorhandler(500)
    def internal_error(error):
        logging.error(f"Unhandled error: {getattr(error, 'original_exception', error)!r}")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return app


def main() -> None:
    settings = load_settings()
    app = create_app(settings)
    app.run(host="0.0.0.0", port=settings.port, debug=os.getenv("FLASK_DEBUG") == "1")


if __name__ == "__main__":
    main()
