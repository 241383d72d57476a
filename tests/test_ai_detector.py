import random

import pytest

from conftest import FixedRng
from core.ai_detector import AIDetector
from core.preprocessor import Preprocessor
from core.stylometry import Stylometry

LONG_WORDS = "extraordinarily comprehensive representation understanding"
SHORT_WORDS = "the cat sat on the mat and was happy"


@pytest.mark.parametrize("keyword", ["gpt", "Gemini", "GENERATIVE", "AI model", "language model"])
def test_keywords_hit_high_band(keyword):
    detector = AIDetector(rng=FixedRng(0))
    assert detector.detect(f"I wrote this. Then I asked a {keyword} for help!") == 85


def test_high_band_upper_edge():
    detector = AIDetector(rng=FixedRng(99))
    assert detector.detect("A large language model wrote this") == 99


def test_long_words_hit_mid_band():
    assert AIDetector(rng=FixedRng(0)).detect(LONG_WORDS) == 50
    assert AIDetector(rng=FixedRng(99)).detect(LONG_WORDS) == 74


def test_short_words_hit_low_band():
    assert AIDetector(rng=FixedRng(0)).detect(SHORT_WORDS) == 5
    assert AIDetector(rng=FixedRng(99)).detect(SHORT_WORDS) == 29


def test_empty_text_falls_to_low_band():
    assert AIDetector(rng=FixedRng(0)).detect("") == 5


def test_word_length_threshold_is_configurable():
    detector = AIDetector(rng=FixedRng(0), word_length_threshold=2.0)
    assert detector.detect(SHORT_WORDS) == 50


def test_offset_spread_per_band():
    rng = FixedRng(0)
    detector = AIDetector(rng=rng)
    detector.detect("gpt")
    detector.detect(LONG_WORDS)
    detector.detect(SHORT_WORDS)
    assert rng.calls == [15, 25, 25]


def test_unseeded_scores_stay_in_band():
    detector = AIDetector()
    for _ in range(50):
        assert 85 <= detector.detect("This essay was drafted with a language model.") < 100
        assert 50 <= detector.detect(LONG_WORDS) < 75
        assert 5 <= detector.detect(SHORT_WORDS) < 30


def test_seeded_rng_is_reproducible():
    first = AIDetector(rng=random.Random(7)).detect(SHORT_WORDS)
    second = AIDetector(rng=random.Random(7)).detect(SHORT_WORDS)
    assert first == second


def test_split_sentences():
    assert Preprocessor.split_sentences("One. Two! Three?") == ["one", " two", " three", ""]


def test_tokenize_limit():
    assert Preprocessor.tokenize("A  b\nC d", limit=3) == ["a", "b", "c"]


def test_average_word_length():
    assert Stylometry.analyze("ab abcd") == {"word_count": 2, "avg_word_length": 3.0}
    assert Stylometry.analyze("  ") == {"word_count": 0, "avg_word_length": 0.0}


def test_text_without_words_stays_low_with_negative_threshold():
    detector = AIDetector(rng=FixedRng(0), word_length_threshold=-1.0)
    assert detector.detect("") == 5
    assert detector.detect(" \n\t ") == 5
    assert detector.detect("ab") == 50
