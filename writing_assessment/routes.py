"""
Writing Assessment Flask Routes
===============================
HTTP boundary for the assessment engine.

Endpoints:
- GET  /api/tasks     list the task catalog
- POST /api/evaluate  score a submission (proofing included unless offline)
- POST /api/proof     pass-through to the proofing service
- GET  /api/status    configuration and integration status
"""

import time
from functools import wraps
from typing import Optional

from flask import Blueprint, current_app, g, jsonify, request

from .aggregator import evaluate_submission
from .config_logging import (
    ConfigurationError,
    MalformedProofResponseError,
    ProofingUnavailableError,
    ProofingUpstreamError,
    ValidationError,
    WritingAssessmentError,
    __version__,
    get_config,
    get_logger,
    validate_language,
)
from .proofing import ProofingClient
from .proofing import get_status as get_proofing_status
from .tasks import get_catalog

logger = get_logger('writing_assessment.routes')

wa_blueprint = Blueprint('writing_assessment', __name__)

MAX_TEXT_LENGTH = 20000


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def _error_response(code: str, message: str, status: int, **details):
    body = {
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown'),
            **details
        }
    }
    return jsonify(body), status


def handle_wa_errors(f):
    """Decorator for standardized API error handling."""
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > 5.0:
                logger.warning(f"Slow API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except ValidationError as e:
            logger.warning(f"Validation error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, 400)
        except ProofingUpstreamError as e:
            logger.warning(f"Upstream error in {f.__name__}: {e}")
            status = e.upstream_status if 400 <= e.upstream_status < 600 else 502
            return _error_response(e.code, e.message, status,
                                   upstream_status=e.upstream_status)
        except (ProofingUnavailableError, MalformedProofResponseError) as e:
            logger.warning(f"Proofing error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except ConfigurationError as e:
            logger.error(f"Configuration error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, 500)
        except WritingAssessmentError as e:
            logger.error(f"Error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


@wa_blueprint.before_request
def assign_correlation_id():
    g.correlation_id = logger.new_correlation_id()


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _text_field(data: dict) -> str:
    text = data.get('text')
    if not isinstance(text, str):
        raise ValidationError("'text' must be a string", field='text')
    if len(text) > MAX_TEXT_LENGTH:
        raise ValidationError(f"'text' exceeds {MAX_TEXT_LENGTH} characters", field='text')
    return text


def _language_field(data: dict) -> Optional[str]:
    language = data.get('language')
    if language is None:
        return None
    if not isinstance(language, str):
        raise ValidationError("'language' must be a string", field='language')
    error = validate_language(language)
    if error:
        raise ValidationError(error, field='language')
    return language


def _proofing_client(language=None) -> ProofingClient:
    factory = current_app.config.get('WA_PROOFING_CLIENT_FACTORY')
    if factory is not None:
        return factory(language)
    return ProofingClient(language=language)


# =============================================================================
# ROUTES
# =============================================================================

@wa_blueprint.route('/api/tasks', methods=['GET'])
@handle_wa_errors
def list_tasks():
    catalog = get_catalog()
    category = request.args.get('category')
    tasks = catalog.by_category(category) if category else list(catalog)
    return jsonify({
        'success': True,
        'tasks': [t.to_dict() for t in tasks],
        'pools': {name: [t.id for t in catalog.pool(name)] for name in catalog.pools()},
    })


@wa_blueprint.route('/api/evaluate', methods=['POST'])
@handle_wa_errors
def evaluate():
    data = _json_body()
    text = _text_field(data)
    task_id = data.get('task_id')
    if not isinstance(task_id, str):
        raise ValidationError("'task_id' is required", field='task_id')
    task = get_catalog().get(task_id)

    offline = bool(data.get('offline')) or not get_config().proof_enabled
    proof_result = None
    if not offline:
        client = _proofing_client(_language_field(data))
        try:
            proof_result = client.proof(text)
        finally:
            client.close()

    dictionary = current_app.config.get('WA_DICTIONARY')
    result = evaluate_submission(
        text, task,
        dictionary=dictionary,
        proof=proof_result,
        include_grammar=offline or proof_result is None or proof_result.degraded,
    )
    return jsonify({'success': True, 'result': result.to_dict()})


@wa_blueprint.route('/api/proof', methods=['POST'])
@handle_wa_errors
def proof_passthrough():
    """Forward text to the proofing service and return its raw JSON."""
    data = _json_body()
    text = _text_field(data)
    if not text.strip():
        return jsonify({'matches': []})

    client = _proofing_client(_language_field(data))
    try:
        return jsonify(client.check_raw(text))
    finally:
        client.close()


@wa_blueprint.route('/api/status', methods=['GET'])
@handle_wa_errors
def status():
    config = get_config()
    is_valid, errors = config.validate()
    return jsonify({
        'success': True,
        'version': __version__,
        'config_valid': is_valid,
        'config_errors': errors,
        'proofing': get_proofing_status(),
        'dictionary_loaded': current_app.config.get('WA_DICTIONARY') is not None,
    })
