from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect
from dotenv import load_dotenv
import os
import logging

load_dotenv()

db = SQLAlchemy()
csrf = CSRFProtect()

def create_app(test_config=None):
    # Validate required environment variables
    required_vars = ['SECRET_KEY']
    for var in required_vars:
        if not os.getenv(var) and not (test_config or {}).get(var):
            raise ValueError(f"Required environment variable {var} is not set")

    app = Flask(__name__)
    app.config.from_object('config')
    if test_config:
        app.config.update(test_config)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    csrf.init_app(app)

    # Register blueprints
    from app.routes.main import main_bp
    from app.projects.eco_calculator.routes import eco_calculator_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(eco_calculator_bp, url_prefix='/eco-calculator')

    # CLI commands
    from app.projects.eco_calculator.commands import eco_cli
    app.cli.add_command(eco_cli)

    # Import models to ensure they're known to Flask-SQLAlchemy
    from app.models import LogEntry

    return app
