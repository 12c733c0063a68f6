import logging

from flask import Flask, request
from flasgger import Swagger
from flask_cors import CORS

from services.auth import AuthService

from .config import auth_settings_from_config, get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)

logger = logging.getLogger(__name__)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Social API",
        "version": "1.0.0",
        "description": "REST API for users, friendships, posts, albums, likes and comments.",
    },
    "basePath": "/",  # Blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Builds one AuthService per app from an immutable AuthSettings value.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"])
    app.extensions["auth_service"] = AuthService(storage, auth_settings_from_config(app.config))

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .friends import bp as friends_bp
    from .posts import bp as posts_bp
    from .albums import bp as albums_bp
    from .social import bp as social_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1")
    app.register_blueprint(friends_bp, url_prefix="/api/v1")
    app.register_blueprint(posts_bp, url_prefix="/api/v1")
    app.register_blueprint(albums_bp, url_prefix="/api/v1")
    # Catch-all resource routes go last
    app.register_blueprint(social_bp, url_prefix="/api/v1")

    @app.after_request
    def log_request(response):
        logger.info("%s %s -> %s", request.method, request.path, response.status_code)
        return response

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Social API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
