from __future__ import annotations

import pytest

from tagwise.core.services.keyword_service import clean_text, extract_candidates, keyword_limit


def test_clean_text_drops_timestamps_and_punctuation() -> None:
    assert clean_text("00:01:15.250 Hello, World! [12:30] 42") == "hello world"


def test_all_stopwords_yield_no_candidates() -> None:
    assert extract_candidates("the the the") == []
    assert extract_candidates("") == []


def test_phrases_are_trimmed_of_edge_stopwords() -> None:
    candidates = extract_candidates("the hotel and the hotel")

    assert "hotel" in candidates
    assert not any(c.startswith("the ") or c.endswith(" the") for c in candidates)


def test_candidates_rank_by_frequency_then_length() -> None:
    text = "python asyncio python asyncio python tips"
    candidates = extract_candidates(text)

    assert candidates[0] == "python"
    assert candidates.index("python asyncio") < candidates.index("tips")


def test_short_phrases_are_dropped() -> None:
    assert "ai" not in extract_candidates("ai ai ai models")


def test_candidate_limit_is_respected() -> None:
    text = " ".join(f"word{chr(97 + i)}{chr(97 + j)}" for i in range(10) for j in range(10))
    assert len(extract_candidates(text, limit=7)) == 7


@pytest.mark.parametrize(
    ("words", "expected"),
    [(0, 5), (99, 5), (100, 6), (950, 14), (1000, 15), (5000, 15)],
)
def test_keyword_limit_scales_with_length(words: int, expected: int) -> None:
    assert keyword_limit(" ".join(["word"] * words)) == expected
