"""
Keyword-incidence bias scoring.

Each family scores the fraction of its keywords that appear at least once
anywhere in the discussion. Repeats do not raise the score.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from .models import BiasMetrics

logger = logging.getLogger(__name__)

POLITICAL_KEYWORDS = ('government', 'policy', 'democrat', 'republican', 'liberal', 'conservative')
EMOTIONAL_KEYWORDS = ('love', 'hate', 'angry', 'happy', 'sad', 'excited')
MORAL_KEYWORDS = ('right', 'wrong', 'good', 'bad', 'moral', 'immoral')


class KeywordBiasScorer:
    """Scores political, emotional and moral framing from fixed keyword lists.

    The lists are small and English-only; pass your own to tune them, or inject
    any object with a compatible ``score(texts)`` method into the engine.
    """

    def __init__(self,
                 political: Optional[Iterable[str]] = None,
                 emotional: Optional[Iterable[str]] = None,
                 moral: Optional[Iterable[str]] = None):
        self.political = self._normalise(POLITICAL_KEYWORDS if political is None else political)
        self.emotional = self._normalise(EMOTIONAL_KEYWORDS if emotional is None else emotional)
        self.moral = self._normalise(MORAL_KEYWORDS if moral is None else moral)

    @staticmethod
    def _normalise(keywords: Iterable[str]) -> List[str]:
        # dict.fromkeys dedupes while keeping order
        return list(dict.fromkeys(k.lower() for k in keywords if k))

    @staticmethod
    def _incidence(text: str, keywords: Sequence[str]) -> float:
        if not keywords:
            return 0.0
        present = sum(1 for keyword in keywords if keyword in text)
        return present / len(keywords)

    def score(self, texts: Iterable[str]) -> BiasMetrics:
        text = " ".join((t or "").lower() for t in texts)
        if not text.strip():
            return BiasMetrics.neutral()

        metrics = BiasMetrics(
            political=self._incidence(text, self.political),
            emotional=self._incidence(text, self.emotional),
            moral=self._incidence(text, self.moral),
        )
        logger.debug(f"Bias metrics: {metrics}")
        return metrics


_default_scorer = KeywordBiasScorer()


def score_bias(texts: Iterable[str]) -> BiasMetrics:
    return _default_scorer.score(texts)
