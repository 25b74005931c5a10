import json

from flask import Flask, jsonify
from flask_cors import CORS
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

# Import utility functions
from utils.config_utils import get_config
from utils.errors import ApiError
from utils.logger import setup_logging, get_logger
from utils.text_utils import format_date_range, format_year_month

# Import service layers
from services.db_schema_service import verify_db_schema

# Import blueprints
from routes.auth_routes import auth_bp
from routes.profile_routes import profile_bp
from routes.resume_routes import resume_bp
from routes.application_routes import application_bp
from routes.resume_generation_routes import resume_generation_bp
from routes.cover_letter_routes import cover_letter_bp
from routes.conversation_starter_routes import conversation_starter_bp
from routes.dashboard_routes import dashboard_bp

logger = get_logger(__name__)

BLUEPRINTS = (
    auth_bp,
    profile_bp,
    resume_bp,
    application_bp,
    resume_generation_bp,
    cover_letter_bp,
    conversation_starter_bp,
    dashboard_bp,
)


def register_error_handlers(app):
    """Turn every error raised by a handler into a JSON body."""

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        if e.status >= 500:
            logger.error("%s", e.message)
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        details = json.loads(e.json(include_url=False))
        return jsonify({"error": "Invalid request data", "details": details}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error: %s", e)
        return jsonify({"error": "Internal server error"}), 500


def create_app(config_dict=None):
    """
    Application factory.

    Args:
        config_dict (dict): Values overriding config.json and the environment (optional)

    Returns:
        Flask: Configured application
    """
    config = get_config(overrides=config_dict)
    setup_logging(config.get("log_level", "INFO"), config.get("log_file"))

    app = Flask(__name__)
    app.config['CONFIG'] = config
    app.config['TEMPLATES_AUTO_RELOAD'] = True
    CORS(app, resources={r"/api/*": {"origins": config.get("app_url")}}, supports_credentials=True)

    app.add_template_filter(format_year_month, 'year_month')
    app.add_template_filter(format_date_range, 'date_range')

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)

    register_error_handlers(app)

    @app.route('/api/health')
    def health():
        return jsonify({"status": "ok"})

    verify_db_schema(config)  # Verify the DB schema before serving requests
    logger.info("Application ready (database: %s)", config["db_path"])
    return app


if __name__ == "__main__":
    application = create_app()
    application.run(debug=True, port=int(application.config['CONFIG']['port']))
