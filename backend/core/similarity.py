import logging
from typing import Iterable

from core.preprocessor import Preprocessor
from core.schemas import SimilarityMatrix, SubmissionRecord

logger = logging.getLogger(__name__)


class SimilarityEngine:
    def __init__(self, token_window: int = 100):
        # Only the opening `token_window` tokens of a text are compared
        self.token_window = token_window

    def token_set(self, text: str) -> set[str]:
        return set(Preprocessor.tokenize(text or "", self.token_window))

    def similarity(self, text1: str, text2: str) -> int:
        """Jaccard index of the two token sets as a 0-100 integer."""
        return self.jaccard(self.token_set(text1), self.token_set(text2))

    @staticmethod
    def jaccard(set1: set[str], set2: set[str]) -> int:
        union = len(set1 | set2)
        if union == 0:
            return 0
        intersection = len(set1 & set2)
        # Round half up on exact integers: floor(100 * i / u + 0.5)
        return (200 * intersection + union) // (2 * union)

    def build_matrix(self, submissions: Iterable[SubmissionRecord]) -> SimilarityMatrix:
        scored = [s for s in submissions if s.has_content]

        matrix: SimilarityMatrix = {s.user_id: {} for s in scored}
        token_sets = [self.token_set(s.content) for s in scored]

        for i in range(len(scored)):
            for j in range(i + 1, len(scored)):
                user_i, user_j = scored[i].user_id, scored[j].user_id
                if user_i == user_j:
                    # Same student twice in one batch; never compare a user to itself
                    continue
                value = self.jaccard(token_sets[i], token_sets[j])
                matrix[user_i][user_j] = value
                matrix[user_j][user_i] = value

        logger.debug(f"Built similarity matrix for {len(matrix)} users ({len(scored)} submissions)")
        return matrix
