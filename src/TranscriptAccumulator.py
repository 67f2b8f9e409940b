"""
TranscriptAccumulator - Committed/in-flight transcript buffers and session merge.

The accumulator owns a TranscriptState with two buffers:
- committed_text: text of sessions that have ended
- session_text: latest hypothesis of the active session (overwritten, never appended)

When a session ends (final result, terminal engine status, new start or stop)
the session text is folded into the committed text. A session whose normalized
text is already the tail of the committed text is dropped, which suppresses the
common case of an engine resending its last hypothesis.
"""
import logging

from src.postprocessing.TextNormalizer import TextNormalizer
from src.types import TranscriptState

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = 'Press "Enable & Start" and speak'


class TranscriptAccumulator:
    """
    Accumulates recognition results into a single transcript.

    Never raises: empty and duplicate text is handled by policy.

    Attributes:
        state: Owned TranscriptState
        placeholder_text: Display text used when both buffers are empty
    """

    def __init__(self, placeholder_text: str = PLACEHOLDER_TEXT,
                 text_normalizer: TextNormalizer | None = None):
        """
        Args:
            placeholder_text: Display text used when the transcript is empty
            text_normalizer: Normalizer for duplicate detection (created if None)
        """
        self.state = TranscriptState()
        self.placeholder_text = placeholder_text
        self._normalizer = text_normalizer or TextNormalizer()

    @property
    def committed_text(self) -> str:
        return self.state.committed_text

    @property
    def session_text(self) -> str:
        return self.state.session_text

    def on_result(self, text: str, is_final: bool) -> None:
        """Replace the in-flight session text; commit it when the result is final.

        Args:
            text: Recognized text of the current session so far
            is_final: True if this is the session's authoritative result
        """
        self.state.session_text = (text or '').strip()
        if is_final:
            self.commit_session()

    def on_session_ended(self) -> None:
        """Commit the in-flight session. Safe to call repeatedly."""
        self.commit_session()

    def commit_session(self) -> None:
        """Fold session_text into committed_text and clear it.

        Algorithm:
            1. Empty session: committed text is unchanged.
            2. Empty committed text: session becomes the committed text.
            3. Normalized committed text already ends with the session: discard.
            4. Otherwise append the session separated by one space.
        """
        session = self.state.session_text.strip()
        self.state.session_text = ''
        if not session:
            return

        committed = self.state.committed_text
        if not committed:
            self.state.committed_text = session
        elif self._normalizer.ends_with_normalized(committed, session):
            logger.debug("Dropping session already at transcript tail: %r", session)
        else:
            self.state.committed_text = f"{committed} {session}"

    def reset(self) -> None:
        """Clear both buffers."""
        self.state.committed_text = ''
        self.state.session_text = ''

    def get_display_text(self) -> str:
        """Return committed and in-flight text joined by a space, or the placeholder."""
        committed = self.state.committed_text.strip()
        live = self.state.session_text.strip()
        if not committed and not live:
            return self.placeholder_text
        if not committed:
            return live
        if not live:
            return committed
        return f"{committed} {live}"
