import os
import logging
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def create_app(test_config=None):
    """Application factory pattern"""
    app = Flask(__name__)
    app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    # Configure the database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///excel_analytics.db")
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }

    # Configure upload settings
    app.config['MAX_CONTENT_LENGTH'] = 200 * 1024 * 1024  # several files per request
    app.config['MAX_FILE_SIZE'] = 50 * 1024 * 1024  # 50MB per file
    app.config['UPLOAD_FOLDER'] = os.environ.get("UPLOAD_FOLDER", "uploads")
    app.config['EXPORT_FOLDER'] = os.environ.get("EXPORT_FOLDER", "exports")

    # Analysis settings
    app.config['TYPE_SAMPLE_SIZE'] = int(os.environ.get("TYPE_SAMPLE_SIZE", 1000))
    app.config['HISTOGRAM_BINS'] = int(os.environ.get("HISTOGRAM_BINS", 10))
    app.config['PREVIEW_ROWS'] = int(os.environ.get("PREVIEW_ROWS", 10))
    app.config['LOG_LEVEL'] = os.environ.get("LOG_LEVEL", "INFO")

    if test_config:
        app.config.update(test_config)

    # Configure logging
    logging.basicConfig(level=app.config['LOG_LEVEL'])

    # Create upload directory if it doesn't exist
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Initialize extensions
    from models import db
    db.init_app(app)

    # Register routes
    from routes import register_routes
    register_routes(app)

    with app.app_context():
        # Create all database tables
        db.create_all()

    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=5000, debug=True)
