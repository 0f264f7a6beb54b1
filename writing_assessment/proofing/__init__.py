"""
Remote Proofing Integration
===========================
Grammar, style and spelling checks through a LanguageTool-compatible HTTP
service, with graceful degradation and sequenced live proofing.

Requires: pip install requests
"""

__version__ = "1.2.0"

from .client import ProofingClient, classify_match, normalize_matches, proof
from .live import LiveProofer, ProofSequencer

_client = None


def get_client() -> ProofingClient:
    """Get the shared ProofingClient instance (lazy loaded from configuration)."""
    global _client
    if _client is None:
        _client = ProofingClient()
    return _client


def reset_client():
    """Drop the shared client (for testing or after a configuration change)."""
    global _client
    if _client is not None:
        _client.close()
    _client = None


def get_status() -> dict:
    """Get proofing integration status without contacting the service."""
    from ..config_logging import ConfigurationError, get_config

    config = get_config()
    if not config.proof_enabled:
        return {'enabled': False, 'configured': False, 'error': None}
    try:
        status = get_client().get_status()
    except ConfigurationError as e:
        return {'enabled': True, 'configured': False, 'error': e.message}
    status.update({'enabled': True, 'configured': True, 'error': status['last_error']})
    return status


__all__ = [
    'ProofingClient',
    'LiveProofer',
    'ProofSequencer',
    'classify_match',
    'normalize_matches',
    'proof',
    'get_client',
    'reset_client',
    'get_status',
]
