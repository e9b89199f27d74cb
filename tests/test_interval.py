import pytest

from seqcache.errors import IntervalOutOfRangeError
from seqcache.interval import SequenceInterval


def make_interval(start=100, end=200, payload="default"):
    if payload == "default":
        payload = "ACGT" * ((end - start) // 4) + "ACGT"[: (end - start) % 4]
    return SequenceInterval("chr1", start, end, payload)


def test_contains():
    interval = make_interval()
    assert interval.contains("chr1", 100, 200)
    assert interval.contains("chr1", 150, 160)
    assert not interval.contains("chr1", 99, 150)
    assert not interval.contains("chr1", 150, 201)
    assert not interval.contains("chr2", 150, 160)


def test_contains_range_counts_equal_ranges():
    interval = make_interval()
    assert interval.contains_range(SequenceInterval("chr1", 100, 200))
    assert interval.contains_range(SequenceInterval("chr1", 120, 130))
    assert not interval.contains_range(SequenceInterval("chr1", 50, 130))
    assert not interval.contains_range(SequenceInterval("chr2", 120, 130))


def test_overlaps():
    interval = make_interval()
    assert interval.overlaps("chr1", 50, 101)
    assert interval.overlaps("chr1", 199, 300)
    assert not interval.overlaps("chr1", 200, 300)
    assert not interval.overlaps("chr1", 0, 100)
    assert not interval.overlaps("chrX", 150, 160)


def test_slice_returns_offset_segment():
    interval = SequenceInterval("chr1", 10, 20, "AAAACCCCGG")
    assert interval.slice(10, 20) == "AAAACCCCGG"
    assert interval.slice(14, 18) == "CCCC"
    assert interval.slice(15, 15) == ""


def test_slice_without_payload_returns_none():
    interval = SequenceInterval("noSuchChr", 0, 100)
    assert interval.slice(0, 10) is None


@pytest.mark.parametrize("start,end", [(5, 15), (15, 25), (18, 12)])
def test_slice_out_of_range(start, end):
    interval = SequenceInterval("chr1", 10, 20, "AAAACCCCGG")
    with pytest.raises(IntervalOutOfRangeError):
        interval.slice(start, end)
    # Still an IndexError for callers that only know the builtin
    with pytest.raises(IndexError):
        interval.slice(start, end)


def test_slice_length_matches_requested_range():
    interval = make_interval(0, 1000)
    for start, end in [(0, 1000), (1, 999), (500, 501), (250, 750)]:
        assert len(interval.slice(start, end)) == end - start


def test_payload_length_must_match_range():
    with pytest.raises(ValueError):
        SequenceInterval("chr1", 0, 10, "ACGT")


def test_invalid_coordinates():
    with pytest.raises(ValueError):
        SequenceInterval("chr1", -1, 10)
    with pytest.raises(ValueError):
        SequenceInterval("chr1", 10, 5)


def test_interval_is_immutable():
    interval = make_interval()
    with pytest.raises(AttributeError):
        interval.payload = "A" * 100


def test_locus_string_and_len():
    interval = make_interval(100, 200)
    assert interval.locus_string == "chr1:101-200"
    assert len(interval) == 100
