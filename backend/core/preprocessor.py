import re
from typing import Optional

SENTENCE_BOUNDARY = re.compile(r'[.!?]')


class Preprocessor:
    @staticmethod
    def tokenize(text: str, limit: Optional[int] = None) -> list[str]:
        """Whitespace tokens, lower-cased, optionally cut to the first `limit`."""
        tokens = text.lower().split()
        if limit is not None:
            tokens = tokens[:limit]
        return tokens

    @staticmethod
    def split_sentences(text: str) -> list[str]:
        # Fragments are kept as-is (lower-cased), empty ones included
        return SENTENCE_BOUNDARY.split(text.lower())
