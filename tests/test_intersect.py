import random

import pytest

from graphmine.intersect import (
    SetIntersection,
    merge_intersection,
    merge_intersection_count,
)


def _sorted_sample(rng, population, k):
    return sorted(rng.sample(range(population), k))


def test_merge_intersection_simple():
    assert merge_intersection([1, 3, 5], [3, 5, 7]) == [3, 5]


def test_merge_intersection_empty_inputs():
    assert merge_intersection([], [1, 2]) == []
    assert merge_intersection([1, 2], []) == []
    assert merge_intersection_count([], []) == 0


def test_merge_intersection_disjoint():
    assert merge_intersection([1, 2, 3], [4, 5, 6]) == []
    assert merge_intersection_count([4, 5, 6], [1, 2, 3]) == 0


def test_merge_is_symmetric_and_count_matches():
    rng = random.Random(7)
    for _ in range(50):
        a = _sorted_sample(rng, 200, rng.randint(0, 60))
        b = _sorted_sample(rng, 200, rng.randint(0, 60))
        result = merge_intersection(a, b)
        assert result == merge_intersection(b, a)
        assert merge_intersection_count(a, b) == len(result)
        assert result == sorted(set(a) & set(b))


def test_merge_identical_lists():
    items = [2, 4, 8, 16]
    assert merge_intersection(items, items) == items


@pytest.mark.parametrize("hybrid", [False, True])
def test_set_intersection_matches_set_semantics(hybrid):
    rng = random.Random(11)
    si = SetIntersection(hybrid)
    for _ in range(40):
        a = _sorted_sample(rng, 5000, rng.randint(0, 10))
        b = _sorted_sample(rng, 5000, rng.randint(0, 2000))
        expected = sorted(set(a) & set(b))
        assert si.compute_candidates(a, b) == expected
        assert si.get_num(a, b) == len(expected)


def test_hybrid_uses_galloping_for_skewed_inputs():
    si = SetIntersection(hybrid=True)
    small = [10]
    large = list(range(200))
    assert si.compute_candidates(small, large) == [10]
    assert si.galloping_count == 1
    assert si.merge_count == 0


def test_hybrid_uses_merge_for_balanced_inputs():
    si = SetIntersection(hybrid=True)
    assert si.compute_candidates([1, 2, 3], [2, 3, 4]) == [2, 3]
    assert si.merge_count == 1
    assert si.galloping_count == 0


def test_non_hybrid_never_counts():
    si = SetIntersection(hybrid=False)
    si.compute_candidates([1], list(range(500)))
    si.compute_candidates([1, 2], [2, 3])
    assert (si.galloping_count, si.merge_count) == (0, 0)


def test_get_num_skewed_and_balanced_agree():
    large = list(range(0, 1000, 3))
    small = [0, 3, 4, 999]
    hybrid = SetIntersection(hybrid=True)
    plain = SetIntersection(hybrid=False)
    assert hybrid.get_num(small, large) == plain.get_num(small, large)
    assert hybrid.get_num(small, large) == len(set(small) & set(large))