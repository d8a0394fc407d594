import math

import pytest

from lostfound_ai.semantic_db.models import ItemStatus, cosine_similarity, target_status_for


@pytest.mark.parametrize("vec", [[1.0, 0.0, 0.0], [0.3, -1.2, 4.5], [1e-3, 2e-3]])
def test_self_similarity_is_one(vec):
    assert cosine_similarity(vec, vec) == pytest.approx(1.0)


def test_similarity_is_symmetric():
    a = [0.2, 0.7, -0.1, 0.4]
    b = [0.9, -0.3, 0.5, 0.05]
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_orthogonal_and_opposite_vectors():
    assert cosine_similarity([1, 0, 0], [0, 1, 0]) == 0.0
    assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)


@pytest.mark.parametrize("a, b", [
    ([], [1.0, 2.0]),
    ([1.0, 2.0], []),
    (None, [1.0]),
    ([1.0], None),
    ([1.0, 2.0], [1.0, 2.0, 3.0]),
    ([0.0, 0.0], [1.0, 2.0]),
    ([1.0, 2.0], [0.0, 0.0]),
    ([1e200, 1.0], [1e200, 1.0]),
    ([float("nan")], [1.0]),
])
def test_degenerate_inputs_score_zero(a, b):
    score = cosine_similarity(a, b)
    assert score == 0.0
    assert not math.isnan(score)


def test_target_status_is_opposite():
    assert target_status_for("lost") is ItemStatus.FOUND
    assert target_status_for("found") is ItemStatus.LOST
    assert ItemStatus.LOST.opposite is ItemStatus.FOUND
    assert ItemStatus.FOUND.opposite is ItemStatus.LOST


def test_unknown_status_searches_lost_items():
    assert target_status_for("misplaced") is ItemStatus.LOST
    assert target_status_for(None) is ItemStatus.LOST
