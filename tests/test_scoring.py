import random

from nlp.scoring import DEFAULT_RANGES, clamp_score, default_score, normalize_scores


def test_parsed_scores_pass_through():
    scores = normalize_scores({"overall": 82, "ats": 74, "readability": 88, "keyword": 65})
    assert (scores.overall, scores.ats, scores.readability, scores.keyword) == (82, 74, 88, 65)
    assert scores.job_match is None


def test_zero_and_missing_scores_fall_in_family_ranges():
    for seed in range(50):
        scores = normalize_scores({"overall": 0}, rng=random.Random(seed))
        for family in ("overall", "ats", "readability", "keyword"):
            low, high = DEFAULT_RANGES[family]
            value = getattr(scores, family)
            assert low <= value < high


def test_seeded_rng_is_repeatable():
    first = normalize_scores({}, rng=random.Random(7))
    second = normalize_scores({}, rng=random.Random(7))
    assert first == second


def test_scores_are_clamped():
    scores = normalize_scores({"overall": 250, "ats": 100, "readability": 99, "keyword": 1, "job_match": 180})
    assert scores.overall == 100
    assert scores.ats == 100
    assert scores.keyword == 1
    assert scores.job_match == 100


def test_job_match_is_never_defaulted():
    scores = normalize_scores({"job_match": 0})
    assert scores.job_match == 0


def test_helpers():
    assert clamp_score(-5) == 0
    assert clamp_score(101) == 100
    assert 70 <= default_score("readability", random.Random(1)) < 90
