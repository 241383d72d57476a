import numpy as np


class Stylometry:
    @staticmethod
    def analyze(text: str) -> dict:
        words = text.split()
        if not words:
            return {"word_count": 0, "avg_word_length": 0.0}

        avg_word_length = np.mean([len(w) for w in words])

        return {
            "word_count": len(words),
            "avg_word_length": float(avg_word_length),
        }
