import pytest

from app.errors import DecodeError, NotFound, StoreUnavailable
from app.schemas import ParameterSet
from app.state import KeyPage, MemoryStore
from app.tracker import FrequencyTracker


def params(label1="Fizz", label2="Buzz", divisor1=3, divisor2=5, limit=15):
    return ParameterSet(divisor1=divisor1, divisor2=divisor2, limit=limit, label1=label1, label2=label2)


class BrokenStore:
    def get(self, key):
        raise StoreUnavailable("down")

    def put(self, key, value):
        raise StoreUnavailable("down")

    def incr(self, key):
        raise StoreUnavailable("down")

    def list_keys(self, prefix, cursor=0, limit=1000):
        raise StoreUnavailable("down")


class RepeatingStore(MemoryStore):
    """Returns every key twice across pages, like a Redis SCAN may."""

    def list_keys(self, prefix, cursor=0, limit=1000):
        page = super().list_keys(prefix, 0, 10_000)
        if cursor == 0:
            return KeyPage(keys=page.keys, cursor=1, list_complete=False)
        return KeyPage(keys=page.keys, cursor=0, list_complete=True)


def test_empty_store_has_no_most_frequent():
    with pytest.raises(NotFound):
        FrequencyTracker(MemoryStore()).most_frequent()


def test_single_hit_is_most_frequent():
    tracker = FrequencyTracker(MemoryStore())
    tracker.record_hit(params())
    assert tracker.most_frequent() == (params(), 1)


def test_two_hits_increment_by_two():
    store = MemoryStore()
    tracker = FrequencyTracker(store, namespace="ns")
    assert tracker.record_hit(params()) == 1
    assert tracker.record_hit(params()) == 2
    assert store.get("ns:" + params().to_key()) == "2"


def test_highest_count_wins():
    tracker = FrequencyTracker(MemoryStore())
    for _ in range(3):
        tracker.record_hit(params("A"))
    tracker.record_hit(params("B"))
    for _ in range(2):
        tracker.record_hit(params("C"))
    assert tracker.most_frequent() == (params("A"), 3)


def test_ties_go_to_smallest_key():
    tracker = FrequencyTracker(MemoryStore())
    tracker.record_hit(params("B"))
    tracker.record_hit(params("A"))
    assert tracker.most_frequent() == (params("A"), 1)


def test_scan_follows_every_page():
    tracker = FrequencyTracker(MemoryStore(), page_size=2)
    for limit in range(1, 8):
        tracker.record_hit(params(limit=limit))
    for _ in range(4):
        tracker.record_hit(params(limit=7))
    assert tracker.most_frequent() == (params(limit=7), 5)
    assert len(tracker.all_counts()) == 7


def test_keys_seen_twice_are_counted_once():
    tracker = FrequencyTracker(RepeatingStore())
    tracker.record_hit(params("A"))
    tracker.record_hit(params("B"))
    assert tracker.all_counts() == [(params("A"), 1), (params("B"), 1)]


def test_keys_outside_namespace_are_ignored():
    store = MemoryStore()
    store.put("other:key", "99")
    tracker = FrequencyTracker(store)
    tracker.record_hit(params())
    assert tracker.most_frequent() == (params(), 1)


def test_non_integer_count_is_treated_as_zero():
    store = MemoryStore()
    tracker = FrequencyTracker(store)
    store.put(tracker.key_for(params("A")), "garbage")
    tracker.record_hit(params("B"))
    assert tracker.most_frequent() == (params("B"), 1)


def test_undecodable_key_raises_decode_error():
    store = MemoryStore()
    store.put("stats:not json", "5")
    with pytest.raises(DecodeError):
        FrequencyTracker(store).most_frequent()


def test_record_hit_swallows_store_failures(caplog):
    assert FrequencyTracker(BrokenStore()).record_hit(params()) is None
    assert "Failed to record hit" in caplog.text


def test_most_frequent_propagates_store_failures():
    with pytest.raises(StoreUnavailable):
        FrequencyTracker(BrokenStore()).most_frequent()


def test_all_counts_highest_first():
    tracker = FrequencyTracker(MemoryStore())
    tracker.record_hit(params("A"))
    tracker.record_hit(params("B"))
    tracker.record_hit(params("B"))
    assert tracker.all_counts() == [(params("B"), 2), (params("A"), 1)]
