import pytest
from dice import SCORE_TABLE, RandomSource, award, count_hits, resolve_round, validate_face

def test_award_table():
    assert [award(h) for h in range(4)] == [0, 100, 300, 1000]

def test_award_never_decreases_with_hits():
    values = [award(h) for h in sorted(SCORE_TABLE)]
    assert values == sorted(values)

@pytest.mark.parametrize("hits", [-1, 4, 10])
def test_award_rejects_impossible_hit_counts(hits):
    with pytest.raises(ValueError):
        award(hits)

def test_count_hits():
    assert count_hits(4, (4, 2, 4)) == 2
    assert count_hits(6, (1, 2, 3)) == 0
    assert count_hits(None, (4, 4, 4)) == 0

def test_random_source_faces_in_range():
    rng = RandomSource(seed=42)
    rolls = [rng.roll_dice() for _ in range(200)]
    assert all(len(r) == 3 for r in rolls)
    faces = {d for r in rolls for d in r}
    assert faces == {1, 2, 3, 4, 5, 6}

def test_random_source_is_reproducible_with_seed():
    a, b = RandomSource(seed=7), RandomSource(seed=7)
    assert [a.roll_dice(5) for _ in range(5)] == [b.roll_dice(5) for _ in range(5)]

def test_resolve_round():
    out = resolve_round(2, [2, 2, 5])
    assert out.roll == (2, 2, 5)
    assert (out.face, out.hits, out.award) == (2, 2, 300)

def test_validate_face():
    assert validate_face(6) == 6
    with pytest.raises(ValueError):
        validate_face(7)
