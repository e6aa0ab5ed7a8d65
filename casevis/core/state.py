"""
CaseVis Viewer State
Session state shared by the notes view, the summary view and the 3D viewer
"""

import time
from typing import Callable, Optional
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhraseRequest:
    """
    Phrase the notes view should locate, paired with a request counter

    The notes view treats (phrase, version) as its change key, so repeating
    the same phrase still produces a new request.
    """
    phrase: Optional[str] = None
    version: int = 0


class TransientMessage:
    """
    A message that clears itself after a timeout

    Showing a new message replaces the pending deadline, so an older
    message's expiry can never clear a newer one.
    """

    def __init__(self, timeout: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self._clock = clock
        self._text: Optional[str] = None
        self._expires_at: Optional[float] = None

    def show(self, text: str):
        self._text = text
        self._expires_at = self._clock() + self.timeout
        logger.debug(f"Showing message '{text}' for {self.timeout}s")

    def clear(self):
        self._text = None
        self._expires_at = None

    @property
    def text(self) -> Optional[str]:
        """Current message, or None once it has expired"""
        if self._text is not None and self._clock() >= self._expires_at:
            self.clear()
        return self._text

    @property
    def remaining(self) -> float:
        if self.text is None:
            return 0.0
        return max(0.0, self._expires_at - self._clock())


@dataclass
class ViewerState:
    """Everything the app keeps between reruns for one session"""
    request: PhraseRequest = field(default_factory=PhraseRequest)
    organ_message: TransientMessage = field(default_factory=TransientMessage)
    last_phrase_nonce: Optional[int] = None
    last_mesh_nonce: Optional[int] = None

    def request_phrase(self, phrase: str) -> PhraseRequest:
        """Ask the notes view to find phrase; always yields a new request"""
        self.request = PhraseRequest(phrase=phrase, version=self.request.version + 1)
        logger.info(f"Phrase request #{self.request.version}: '{phrase}'")
        return self.request

    def accept_phrase_click(self, event: Optional[dict]) -> bool:
        """
        Handle a summary-view click event once

        Component values persist across reruns, so each event carries a nonce
        and is only acted on the first time it is seen.
        """
        if not event or event.get('nonce') == self.last_phrase_nonce:
            return False
        self.last_phrase_nonce = event.get('nonce')
        self.request_phrase(event['phrase'])
        return True

    def accept_mesh_click(self, event: Optional[dict]) -> Optional[str]:
        """Return the clicked mesh name for a new model-viewer event, else None"""
        if not event or event.get('nonce') == self.last_mesh_nonce:
            return None
        self.last_mesh_nonce = event.get('nonce')
        return event.get('mesh')
