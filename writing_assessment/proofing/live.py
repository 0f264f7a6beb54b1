"""
Live Proofing
=============
Proofing while the writer types: successive edits are debounced, every
proofing request carries a monotonically increasing sequence token, and a
response is delivered only if its token is still the latest one issued.

Cancellation is advisory. A superseded request keeps running; its response
is dropped when it arrives.
"""

import threading
from typing import Callable, Optional

from ..config_logging import get_config, get_logger
from ..models import ProofResult
from .client import ProofingClient

__version__ = "1.2.0"

logger = get_logger('writing_assessment.proofing.live')

ResultCallback = Callable[[str, ProofResult], None]


class ProofSequencer:
    """Thread-safe monotonic token source with stale-token detection."""

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = 0

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest

    def next_token(self) -> int:
        """Issue a new token; every earlier token becomes stale."""
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest


class LiveProofer:
    """
    Debounced, sequenced proofing for an editor.

    Args:
        on_result: Called as ``on_result(text, result)`` for fresh results only
        proof_fn: Proofing function (defaults to a ProofingClient's ``proof``)
        debounce_ms: Quiet period before a request is sent
        client: ProofingClient to use when ``proof_fn`` is not given
    """

    def __init__(
        self,
        on_result: ResultCallback,
        proof_fn: Optional[Callable[[str], ProofResult]] = None,
        debounce_ms: Optional[int] = None,
        client: Optional[ProofingClient] = None
    ):
        if proof_fn is None:
            client = client or ProofingClient()
            proof_fn = client.proof
        self._proof_fn = proof_fn
        self._on_result = on_result
        self.debounce_ms = get_config().debounce_ms if debounce_ms is None else debounce_ms
        self.sequencer = ProofSequencer()
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, text: str) -> int:
        """
        Schedule proofing of ``text`` after the quiet period.

        Any pending schedule is cancelled and any in-flight request becomes
        stale. Returns the token assigned to this edit.
        """
        # Tokens are issued under the scheduling lock so timers are
        # installed in token order.
        with self._lock:
            token = self.sequencer.next_token()
            if self._closed:
                return token
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(
                self.debounce_ms / 1000.0, self._run, args=(token, text)
            )
            self._timer.daemon = True
            self._timer.start()
        return token

    def run_now(self, text: str) -> Optional[ProofResult]:
        """Proof immediately on the calling thread; returns None if superseded meanwhile."""
        token = self.sequencer.next_token()
        return self._run(token, text)

    def cancel(self):
        """Drop the pending schedule and invalidate any in-flight request."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self.sequencer.next_token()

    def close(self):
        self.cancel()
        with self._lock:
            self._closed = True

    def deliver(self, token: int, text: str, result: ProofResult) -> bool:
        """Hand ``result`` to the callback if ``token`` is still current."""
        if not self.sequencer.is_current(token):
            logger.debug("Discarding stale proofing result", token=token,
                         latest=self.sequencer.latest)
            return False
        self._on_result(text, result)
        return True

    def _run(self, token: int, text: str) -> Optional[ProofResult]:
        if not self.sequencer.is_current(token):
            return None
        result = self._proof_fn(text)
        try:
            delivered = self.deliver(token, text, result)
        except Exception as e:
            logger.exception(f"Live proofing callback failed: {e}", token=token)
            return None
        return result if delivered else None
