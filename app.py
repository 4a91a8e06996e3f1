from flask import Flask, jsonify

from config import settings, setup_logging
from extensions import db_session, init_db
from reference_data import build_provider
from routes import itinerary_bp


def create_app(provider=None, config=settings, configure_logging=True):
    """Application factory; `provider` overrides the configured reference source."""
    if configure_logging:
        setup_logging(config.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key

    app.extensions["reference_provider"] = provider or build_provider(config)
    app.register_blueprint(itinerary_bp)

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        db_session.remove()

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "reference_provider": app.extensions["reference_provider"].name,
        })

    return app


if __name__ == "__main__":
    if settings.reference_provider == "database":
        init_db()
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)
