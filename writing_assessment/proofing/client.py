"""
Proofing Service Client
=======================
Sends a submission to a LanguageTool-compatible checking service over HTTP
and normalizes its matches into spelling / grammar / style / other issues.

``ProofingClient.check_raw()`` raises typed errors for transport, upstream
and payload failures. ``ProofingClient.proof()`` never raises on those: it
returns an empty, ``degraded`` ProofResult instead so that scoring can go on
without the service.

Requires: pip install requests
"""

from typing import Any, Dict, List, Optional

import requests

from ..config_logging import (
    ConfigurationError,
    EngineConfig,
    MalformedProofResponseError,
    ProofingUnavailableError,
    ProofingUpstreamError,
    get_config,
    get_logger,
    validate_endpoint,
    validate_language,
)
from ..models import HighlightToken, ProofCounts, ProofIssue, ProofResult

__version__ = "1.2.0"

logger = get_logger('writing_assessment.proofing')

EXAMPLE_CONTEXT_CHARS = 20
HIGHLIGHT_TYPES = ('spelling', 'grammar')


def classify_match(match: Dict[str, Any]) -> str:
    """
    Map a service match onto the issue taxonomy.

    Substring cascade over the rule's issueType, category and description:
    misspelling/typos/spelling -> spelling, grammar -> grammar,
    style/punctuation -> style, anything else -> other.
    """
    rule = match.get('rule') or {}
    if not isinstance(rule, dict):
        rule = {}
    category = rule.get('category') or {}
    if isinstance(category, dict):
        category_id = str(category.get('id') or category.get('name') or '').lower()
    else:
        category_id = str(category).lower()
    issue_type = str(rule.get('issueType') or '').lower()
    description = str(rule.get('description') or '').lower()

    if 'misspell' in issue_type or 'typos' in category_id or 'spelling' in description:
        return 'spelling'
    if 'grammar' in issue_type or 'grammar' in category_id:
        return 'grammar'
    if 'style' in issue_type or 'style' in category_id or 'punctuation' in category_id:
        return 'style'
    return 'other'


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _first_replacement(match: Dict[str, Any]) -> Optional[str]:
    replacements = match.get('replacements') or []
    if isinstance(replacements, list) and replacements:
        first = replacements[0]
        if isinstance(first, dict) and isinstance(first.get('value'), str):
            return first['value']
    return None


def _example(match: Dict[str, Any], text: str, start: int, end: int) -> Optional[str]:
    """Short surrounding text: the service's context when present, else the submission."""
    context = match.get('context')
    if isinstance(context, dict):
        ctx_text = context.get('text')
        ctx_offset = context.get('offset')
        ctx_length = context.get('length')
        if isinstance(ctx_text, str) and ctx_text and _is_int(ctx_offset) and _is_int(ctx_length):
            lo = max(0, ctx_offset - EXAMPLE_CONTEXT_CHARS)
            hi = min(len(ctx_text), ctx_offset + ctx_length + EXAMPLE_CONTEXT_CHARS)
            return ctx_text[lo:hi] or None
    if text and start < len(text):
        lo = max(0, start - EXAMPLE_CONTEXT_CHARS)
        return text[lo:min(len(text), end + EXAMPLE_CONTEXT_CHARS)] or None
    return None


def normalize_matches(matches: List[Any], text: str = "") -> ProofResult:
    """
    Build a ProofResult from the service's ``matches`` array.

    Raises MalformedProofResponseError when a match lacks an integer
    offset/length.
    """
    issues: List[ProofIssue] = []
    for index, match in enumerate(matches):
        if not isinstance(match, dict):
            raise MalformedProofResponseError(f"Match {index} is not an object")
        offset = match.get('offset')
        length = match.get('length')
        if not _is_int(offset) or not _is_int(length):
            raise MalformedProofResponseError(f"Match {index} has no integer offset/length")

        start = max(0, offset)
        end = max(start, offset + length)
        rule = match.get('rule') if isinstance(match.get('rule'), dict) else {}
        message = (match.get('message') or match.get('shortMessage')
                   or rule.get('description') or "Issue")

        issues.append(ProofIssue(
            type=classify_match(match),
            message=str(message),
            start=start,
            end=end,
            suggestion=_first_replacement(match),
            example=_example(match, text, start, end),
            rule_id=str(rule.get('id') or ''),
        ))

    tokens = [
        HighlightToken(
            start=issue.start, end=issue.end,
            word=text[issue.start:issue.end] if text else "",
            suggestion=issue.suggestion, source='proof'
        )
        for issue in issues if issue.type in HIGHLIGHT_TYPES
    ]
    counts = ProofCounts(
        spelling=sum(1 for i in issues if i.type == 'spelling'),
        grammar=sum(1 for i in issues if i.type == 'grammar'),
        style=sum(1 for i in issues if i.type == 'style'),
        other=sum(1 for i in issues if i.type == 'other'),
    )
    return ProofResult(issues=issues, tokens_for_highlight=tokens, counts=counts)


class ProofingClient:
    """
    HTTP client for a LanguageTool-compatible ``/v2/check`` endpoint.

    Endpoint and language are validated on construction; an invalid value
    raises ConfigurationError immediately.
    """

    INTEGRATION_NAME = "LanguageTool (HTTP)"
    INTEGRATION_VERSION = "1.2.0"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        language: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        config: Optional[EngineConfig] = None
    ):
        config = config or get_config()
        self.endpoint = (endpoint or config.proof_endpoint or '').strip()
        self.language = language or config.proof_language
        self.timeout = timeout if timeout is not None else config.proof_timeout

        endpoint_error = validate_endpoint(self.endpoint)
        if endpoint_error:
            raise ConfigurationError(endpoint_error, setting='proof_endpoint')
        language_error = validate_language(self.language)
        if language_error:
            raise ConfigurationError(language_error, setting='proof_language')
        if not self.timeout or self.timeout <= 0:
            raise ConfigurationError("Proofing timeout must be positive", setting='proof_timeout')

        self._session = session or requests.Session()
        self._owns_session = session is None
        self._last_error: Optional[str] = None

    @property
    def last_error(self) -> Optional[str]:
        """Reason of the most recent degraded call, if any."""
        return self._last_error

    def get_status(self) -> Dict[str, Any]:
        return {
            'integration': self.INTEGRATION_NAME,
            'endpoint': self.endpoint,
            'language': self.language,
            'timeout': self.timeout,
            'last_error': self._last_error,
        }

    def check_raw(self, text: str) -> Dict[str, Any]:
        """
        POST ``text`` to the service and return its decoded JSON payload.

        Raises:
            ProofingUnavailableError: transport failure or timeout
            ProofingUpstreamError: non-2xx response
            MalformedProofResponseError: body is not JSON with a ``matches`` array
        """
        form = {
            'text': text,
            'language': self.language,
            'enabledOnly': 'false',
        }
        try:
            response = self._session.post(self.endpoint, data=form, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise ProofingUnavailableError(
                f"Proofing service timed out after {self.timeout}s", endpoint=self.endpoint
            )
        except requests.RequestException as e:
            raise ProofingUnavailableError(
                f"Proofing service unreachable: {str(e)[:120]}", endpoint=self.endpoint
            )

        if not 200 <= response.status_code < 300:
            body = (response.text or '').strip()[:200]
            raise ProofingUpstreamError(
                response.status_code,
                f"Proofing service error: {body}" if body else "",
                endpoint=self.endpoint,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedProofResponseError(f"Response is not JSON: {str(e)[:80]}")

        if not isinstance(payload, dict) or not isinstance(payload.get('matches'), list):
            raise MalformedProofResponseError("Response has no 'matches' array")
        return payload

    def proof(self, text: str) -> ProofResult:
        """Proof ``text``; any service failure yields an empty degraded result."""
        if not text or not text.strip():
            return ProofResult.empty()

        try:
            payload = self.check_raw(text)
            result = normalize_matches(payload['matches'], text)
        except (ProofingUnavailableError, ProofingUpstreamError, MalformedProofResponseError) as e:
            self._last_error = e.message
            logger.warning(f"Proofing degraded: {e.message}", code=e.code,
                           endpoint=self.endpoint)
            return ProofResult.empty(error=e.message)
        except Exception as e:
            self._last_error = f"Unexpected proofing failure: {type(e).__name__}"
            logger.exception(f"Unexpected error while proofing: {e}", endpoint=self.endpoint)
            return ProofResult.empty(error=self._last_error)

        self._last_error = None
        logger.debug("Proofing completed", issues=result.counts.total)
        return result

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def proof(
    text: str,
    language: Optional[str] = None,
    endpoint: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None
) -> ProofResult:
    """
    One-shot proofing call.

    Raises ConfigurationError for an invalid endpoint or language; every
    runtime failure is returned as an empty degraded result.
    """
    client = ProofingClient(endpoint=endpoint, language=language,
                            timeout=timeout, session=session)
    try:
        return client.proof(text)
    finally:
        client.close()
