"""
Transcript View

Turns the stream of TranscriptUpdate events into the text a caption UI shows.
Decoupled from the pipeline and from any UI toolkit.

Display policies:
  - replace: the latest update supersedes everything shown
  - append:  updates accumulate; a non-final update (streaming backend still
             refining the utterance) is replaced by the next update instead of
             being followed by it
"""

import logging
from collections.abc import Callable

from subwave.core.models import DisplayPolicy, TranscriptUpdate

logger = logging.getLogger(__name__)


class TranscriptView:
    """
    Holds displayed transcript segments.

    Simple API:
        view = TranscriptView(policy="append")
        view.apply(update)              # from controller.updates
        print(view.get_text())

    Callbacks:
        view.on_change = lambda: window.update_text(view.get_text())
    """

    def __init__(self, policy: DisplayPolicy | str = DisplayPolicy.REPLACE, max_words: int = 300):
        """
        Initialize the view.

        Args:
            policy: "replace" or "append"
            max_words: Maximum words returned by get_text() (keeps last N)
        """
        self.policy = DisplayPolicy(policy)
        self.max_words = max_words
        self._segments: list[str] = []
        # True while the last segment may still be refined
        self._tail_open = False

        # Callback when the displayed text changes
        self.on_change: Callable[[], None] | None = None

    def apply(self, update: TranscriptUpdate) -> bool:
        """
        Apply one update.

        Returns:
            True if an existing segment was replaced, False if appended
        """
        if self.policy == DisplayPolicy.REPLACE:
            is_replace = bool(self._segments)
            self._segments = [update.text]
        else:
            is_replace = self._tail_open and bool(self._segments)
            if is_replace:
                self._segments[-1] = update.text
            else:
                self._segments.append(update.text)
            self._trim()

        self._tail_open = not update.is_final
        action = "REPLACE" if is_replace else "APPEND"
        logger.debug(f"[{action}] #{update.sequence} = '{update.text[:50]}'")
        self._notify()
        return is_replace

    def _trim(self):
        # Drop whole leading segments once they fall outside the word window
        words = sum(len(s.split()) for s in self._segments)
        while len(self._segments) > 1 and words - len(self._segments[0].split()) >= self.max_words:
            words -= len(self._segments.pop(0).split())

    def get_text(self, max_words: int | None = None) -> str:
        """
        Get the displayed text.

        Args:
            max_words: Override for the view's word limit. 0 or less for all.
        """
        limit = self.max_words if max_words is None else max_words
        full_text = " ".join(text for text in self._segments if text)
        if limit and limit > 0:
            words = full_text.split()
            if len(words) > limit:
                full_text = " ".join(words[-limit:])
        return full_text

    def clear(self) -> None:
        """Clear all segments."""
        self._segments.clear()
        self._tail_open = False
        self._notify()

    def _notify(self):
        if self.on_change:
            try:
                self.on_change()
            except Exception as e:
                logger.warning(f"Transcript change callback failed: {e}")

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    def __repr__(self) -> str:
        return f"TranscriptView({self.policy.value}, {self.segment_count} segments)"

    def __len__(self) -> int:
        return self.segment_count
