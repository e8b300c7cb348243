import pytest

from app.services.ai.sentiment.contracts import (
    DEFAULT_LEXICON,
    ConfidenceMode,
    KeywordLexicon,
    Label,
)
from app.services.ai.sentiment.heuristic import classify_heuristic, score_text


def test_positive_cues_win():
    label, _ = classify_heuristic("I love this, it is great")
    assert label is Label.POSITIVE


def test_negative_cues_win():
    label, _ = classify_heuristic("This is terrible and awful")
    assert label is Label.NEGATIVE


def test_no_cues_is_neutral():
    label, confidence = classify_heuristic("The weather report is due Tuesday")
    assert label is Label.NEUTRAL
    assert confidence == 0.5


def test_empty_string_is_neutral():
    assert classify_heuristic("") == (Label.NEUTRAL, 0.5)
    assert classify_heuristic("", mode=ConfidenceMode.FIXED) == (Label.NEUTRAL, 0.8)


def test_matching_is_case_insensitive():
    label, _ = classify_heuristic("GREAT JOB, AMAZING WORK")
    assert label is Label.POSITIVE


def test_each_cue_counts_once():
    score = score_text("bad bad bad bad, but good and great")
    assert score.negative_count == 1
    assert score.positive_count == 2
    assert score.label is Label.POSITIVE


def test_substring_matching_counts_embedded_cues():
    # "sad" appears inside "crusade"; presence is substring-based.
    score = score_text("a crusade")
    assert score.negative_count == 1
    assert score.label is Label.NEGATIVE


def test_tie_is_neutral():
    score = score_text("good but bad")
    assert score.label is Label.NEUTRAL
    assert score.ratio_confidence == 0.5


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("good", 1.0),
        ("good great bad", 2 / 3),
        ("awful horrible worst great", 3 / 4),
    ],
)
def test_ratio_confidence(text, expected):
    _, confidence = classify_heuristic(text, mode=ConfidenceMode.RATIO)
    assert confidence == pytest.approx(expected)


def test_fixed_mode_returns_given_confidence():
    assert classify_heuristic("I love it", mode=ConfidenceMode.FIXED) == (Label.POSITIVE, 0.8)
    assert classify_heuristic("I hate it", mode=ConfidenceMode.FIXED, fixed_confidence=0.5) == (
        Label.NEGATIVE,
        0.5,
    )


def test_custom_lexicon():
    lexicon = KeywordLexicon(positive=frozenset({"yay"}), negative=frozenset({"boo"}))
    assert classify_heuristic("yay yay", lexicon=lexicon)[0] is Label.POSITIVE
    # Default cues are ignored with a custom lexicon.
    assert classify_heuristic("great", lexicon=lexicon)[0] is Label.NEUTRAL


def test_lexicon_rejects_overlap():
    with pytest.raises(ValueError, match="both positive and negative"):
        KeywordLexicon(positive=frozenset({"ok"}), negative=frozenset({"ok", "bad"}))


def test_default_lexicon_is_disjoint():
    assert not DEFAULT_LEXICON.positive & DEFAULT_LEXICON.negative
    assert len(DEFAULT_LEXICON.positive) == 9
    assert len(DEFAULT_LEXICON.negative) == 9
