"""Tests for review counters and streaks."""

from datetime import date, timedelta

from mindflash.domain.review_log import ReviewLog

TODAY = date(2025, 1, 2)


def _days_ago(n):
    return TODAY - timedelta(days=n)


def test_record_review_creates_and_increments():
    log = ReviewLog()
    assert log.record_review(TODAY) == 1
    assert log.record_review(TODAY) == 2
    assert log.count_on(TODAY) == 2
    assert log.count_on(_days_ago(1)) == 0


def test_streak_stops_at_gap():
    log = ReviewLog({TODAY: 2, _days_ago(1): 1, _days_ago(2): 0, _days_ago(3): 5})
    assert log.compute_streak(TODAY) == 2


def test_streak_zero_until_first_review_today():
    log = ReviewLog({_days_ago(1): 3, _days_ago(2): 3})
    assert log.compute_streak(TODAY) == 0
    assert log.compute_streak(_days_ago(1)) == 2

    log.record_review(TODAY)
    assert log.compute_streak(TODAY) == 3


def test_streak_crosses_year_boundary():
    # 2025-01-02 back to 2024-12-30
    log = ReviewLog({_days_ago(n): 1 for n in range(4)})
    assert log.compute_streak(TODAY) == 4


def test_reviews_in_window_zero_fills_oldest_first():
    log = ReviewLog({TODAY: 4, _days_ago(2): 1, _days_ago(10): 9})

    window = log.reviews_in_window(3, as_of=TODAY)

    assert window == [(_days_ago(2), 1), (_days_ago(1), 0), (TODAY, 4)]


def test_reviews_in_window_default_length():
    assert len(ReviewLog().reviews_in_window(as_of=TODAY)) == 14


def test_total_and_clear():
    log = ReviewLog({TODAY: 2, _days_ago(1): 3})
    assert log.total() == 5
    log.clear()
    assert len(log) == 0
