# src/postprocessing/TextNormalizer.py
import re

# Anything that is not a lowercase ASCII letter, a digit or whitespace
_NON_WORD_RE = re.compile(r'[^a-z0-9\s]')
_WHITESPACE_RE = re.compile(r'\s+')


class TextNormalizer:
    """Normalizes text for duplicate detection by removing punctuation,
    normalizing case and cleaning whitespace.

    Recognition engines resend hypotheses that differ from text already in the
    transcript only in formatting (punctuation, case, spacing). Normalized
    forms are used for comparison only and are never displayed.
    """

    def normalize_text(self, text: str) -> str:
        """Normalize text for duplicate detection.

        Performs the following normalization steps:
        1. Case normalization to lowercase
        2. Replace every character outside [a-z0-9] and whitespace with a space
        3. Collapse whitespace runs to a single space
        4. Trim leading/trailing whitespace

        The result is idempotent: normalizing normalized text returns it unchanged.

        Args:
            text: Input text to normalize

        Returns:
            Normalized text string suitable for comparison
        """
        if not text:
            return ""

        lowercased = text.lower()
        cleaned = _NON_WORD_RE.sub(' ', lowercased)
        return _WHITESPACE_RE.sub(' ', cleaned).strip()

    def ends_with_normalized(self, base: str, suffix: str) -> bool:
        """Check whether base already ends with suffix, ignoring formatting.

        The comparison is a literal trailing-substring check on the normalized
        forms; no word-boundary alignment is required.

        Args:
            base: Text already in the transcript
            suffix: Candidate text

        Returns:
            True if the normalized suffix is empty or the normalized base ends with it
        """
        normalized_suffix = self.normalize_text(suffix)
        if not normalized_suffix:
            return True
        return self.normalize_text(base).endswith(normalized_suffix)
