import logging
import random
from typing import Optional

from core.preprocessor import Preprocessor
from core.stylometry import Stylometry

logger = logging.getLogger(__name__)

AI_KEYWORDS = ("gpt", "gemini", "generative", "ai model", "language model")

# (base, spread): score is base + rng.randrange(spread)
HIGH_BAND = (85, 15)
MID_BAND = (50, 25)
LOW_BAND = (5, 25)


class AIDetector:
    """Heuristic AI-likelihood scorer.

    This is not a classifier. A text that talks about generative models scores
    high, long average words score mid, everything else low. The offset inside
    each band comes from `rng` so near-identical texts don't get identical
    scores; pass a seeded `random.Random` (or anything with `randrange`) for
    reproducible values.
    """

    def __init__(self, rng: Optional[random.Random] = None, word_length_threshold: float = 6.5):
        self.rng = rng if rng is not None else random.Random()
        self.word_length_threshold = word_length_threshold

    def mentions_ai(self, text: str) -> bool:
        sentences = Preprocessor.split_sentences(text)
        return any(keyword in sentence for sentence in sentences for keyword in AI_KEYWORDS)

    def band(self, text: str) -> tuple[int, int]:
        if self.mentions_ai(text):
            return HIGH_BAND

        metrics = Stylometry.analyze(text)
        if metrics["word_count"] == 0:
            return LOW_BAND
        if metrics["avg_word_length"] > self.word_length_threshold:
            return MID_BAND

        return LOW_BAND

    def detect(self, text: str) -> int:
        base, spread = self.band(text or "")
        score = base + self.rng.randrange(spread)
        return max(0, min(100, score))
