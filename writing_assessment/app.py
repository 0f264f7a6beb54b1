"""
Writing Assessment Flask Application
====================================
Application factory for the HTTP boundary.

Run locally:
    flask --app writing_assessment.app run
"""

from typing import Any, Dict, Optional

from flask import Flask

from .config_logging import get_config, get_logger
from .lexicon import load_word_list
from .routes import wa_blueprint

logger = get_logger('writing_assessment.app')


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Create the Flask app, loading the optional dictionary once."""
    app = Flask(__name__)
    config = get_config()

    app.config['WA_DICTIONARY'] = None
    if config.dictionary_path:
        try:
            app.config['WA_DICTIONARY'] = load_word_list(config.dictionary_path)
            logger.info(f"Dictionary loaded: {len(app.config['WA_DICTIONARY'])} words",
                        path=str(config.dictionary_path))
        except OSError as e:
            logger.warning(f"Dictionary not loaded, unknown-word checks disabled: {e}",
                           path=str(config.dictionary_path))

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.warning(f"Configuration problem: {error}")

    if overrides:
        app.config.update(overrides)

    app.register_blueprint(wa_blueprint)

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    return app
