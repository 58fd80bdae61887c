"""Tests for ziplatest.zip_latest — slot refresh and the combine driver."""

import copy
import logging

import pytest

from ziplatest.config import ZipConfig
from ziplatest.context import Context, Waker
from ziplatest.poll import DONE, PENDING, Failed, Ready
from ziplatest.stream import Fuse, Stream
from ziplatest.testing import ScriptedSource, drain, drain_outcomes
from ziplatest.zip_latest import Slot, ZipLatest, enqueue, zip_latest

# ---------------------------------------------------------------------------
# Pairing
# ---------------------------------------------------------------------------


class TestPairing:
    def test_both_empty(self) -> None:
        assert drain(zip_latest([], [])) == []

    @pytest.mark.parametrize(
        ("left", "right"),
        [([], [0, 1, 2]), ([0, 1, 2], [])],
        ids=["left-empty", "right-empty"],
    )
    def test_one_side_empty(self, left: list[int], right: list[int]) -> None:
        assert drain(zip_latest(left, right)) == []

    def test_equal_lengths_pair_positionally(self) -> None:
        assert drain(zip_latest([0, 1, 2], [0, 1, 2])) == [(0, 0), (1, 1), (2, 2)]

    def test_shorter_right_reuses_last_value(self) -> None:
        assert drain(zip_latest([0, 1, 2], [0, 1])) == [(0, 0), (1, 1), (2, 1)]

    def test_shorter_left_reuses_last_value(self) -> None:
        assert drain(zip_latest([0, 1], [0, 1, 2])) == [(0, 0), (1, 1), (1, 2)]

    def test_left_pending_between_items(self) -> None:
        left = ScriptedSource(0, 1, PENDING, 2)
        assert drain(zip_latest(left, [0, 1, 2])) == [(0, 0), (1, 1), (1, 2), (2, 2)]

    def test_right_pending_between_items(self) -> None:
        right = ScriptedSource(0, 1, PENDING, 2)
        assert drain(zip_latest([0, 1, 2], right)) == [(0, 0), (1, 1), (2, 1), (2, 2)]

    def test_single_value_pairs_with_every_update(self) -> None:
        assert drain(zip_latest(["cfg"], [1, 2, 3])) == [("cfg", 1), ("cfg", 2), ("cfg", 3)]


# ---------------------------------------------------------------------------
# Fresh values are never dropped
# ---------------------------------------------------------------------------


class TestFreshValueKept:
    def test_fresh_side_not_polled_while_other_side_fills(self) -> None:
        left = ScriptedSource(0, 1, 2)
        right = ScriptedSource(PENDING, PENDING, 5)
        stream = ZipLatest(left, right)
        cx = Context.noop()

        assert stream.poll_next(cx) == PENDING
        assert stream.poll_next(cx) == PENDING
        assert stream.poll_next(cx) == Ready((0, 5))
        # 0 was held until it could be paired
        assert left.polls == 1

        assert drain(stream) == [(1, 5), (2, 5)]

    def test_enqueue_skips_fresh_slot(self) -> None:
        source = ScriptedSource(1, 2)
        slot: Slot[int] = Slot()
        fused = Fuse(source)
        cx = Context.noop()

        assert enqueue(fused, slot, cx) is None
        assert enqueue(fused, slot, cx) is None
        assert (slot.value, slot.fresh) == (1, True)
        assert source.polls == 1

    def test_enqueue_refreshes_stale_slot(self) -> None:
        source = ScriptedSource(1, 2)
        slot: Slot[int] = Slot()
        fused = Fuse(source)
        cx = Context.noop()

        enqueue(fused, slot, cx)
        slot.fresh = False
        enqueue(fused, slot, cx)
        assert (slot.value, slot.fresh) == (2, True)

    def test_enqueue_keeps_stale_value_on_pending_and_done(self) -> None:
        source = ScriptedSource(1, PENDING)
        slot: Slot[int] = Slot()
        fused = Fuse(source)
        cx = Context.noop()

        enqueue(fused, slot, cx)
        slot.fresh = False
        enqueue(fused, slot, cx)
        enqueue(fused, slot, cx)
        assert (slot.value, slot.filled, slot.fresh) == (1, True, False)
        assert fused.is_done

    def test_enqueue_returns_failure(self) -> None:
        err = ValueError("boom")
        slot: Slot[int] = Slot()
        failure = enqueue(Fuse(ScriptedSource(err)), slot, Context.noop())
        assert failure == Failed(err)
        assert not slot.filled


# ---------------------------------------------------------------------------
# Termination
# ---------------------------------------------------------------------------


class TestTermination:
    def test_done_is_absorbing(self) -> None:
        left = ScriptedSource(0)
        right = ScriptedSource(0)
        stream = ZipLatest(left, right)
        cx = Context.noop()

        assert drain(stream) == [(0, 0)]
        for _ in range(3):
            assert stream.poll_next(cx) == DONE
        assert left.polls_after_done == 0
        assert right.polls_after_done == 0

    def test_is_done_does_not_poll(self) -> None:
        left = ScriptedSource(0)
        stream = ZipLatest(left, ScriptedSource(0))
        assert stream.is_done is False
        assert left.polls == 0

    def test_finished_empty_side_ends_stream_with_unpaired_values(self) -> None:
        """A side that finishes without a value ends the whole stream.

        The other side's values are never emitted, even though they were
        produced and are still fresh.
        """
        left = ScriptedSource(PENDING, DONE)
        right = ScriptedSource(0, 1)
        stream = ZipLatest(left, right)
        cx = Context.noop()

        assert stream.poll_next(cx) == PENDING
        assert stream.poll_next(cx) == DONE
        assert stream.is_done
        assert right.polls == 1

    def test_pending_until_both_sides_fill(self) -> None:
        stream = ZipLatest(ScriptedSource(PENDING, 1), ScriptedSource(7))
        cx = Context.noop()
        assert stream.poll_next(cx) == PENDING
        assert stream.poll_next(cx) == Ready((1, 7))
        assert stream.poll_next(cx) == DONE


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_left_failure_stops_pairs(self) -> None:
        err = ValueError("left feed lost")
        right = ScriptedSource(0, 1, 2)
        outcomes = drain_outcomes(ZipLatest(ScriptedSource(0, 1, err), right))

        assert outcomes == [Ready((0, 0)), Ready((1, 1)), Failed(err)]
        # The poll that failed on the left never reached the right side
        assert right.polls == 2

    def test_right_failure_stops_pairs(self) -> None:
        err = RuntimeError("right feed lost")
        outcomes = drain_outcomes(zip_latest([0, 1, 2], ScriptedSource(0, err)))
        assert outcomes == [Ready((0, 0)), Failed(err)]

    def test_left_failure_reported_first(self) -> None:
        left_err, right_err = KeyError("left"), KeyError("right")
        right = ScriptedSource(right_err)
        outcome = ZipLatest(ScriptedSource(left_err), right).poll_next(Context.noop())

        assert outcome == Failed(left_err)
        assert right.polls == 0

    def test_drain_raises_original_exception(self) -> None:
        with pytest.raises(ValueError, match="boom"):
            drain(zip_latest(ScriptedSource(0, ValueError("boom")), [0, 1]))

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="ziplatest.stream")
        config = ZipConfig(name="ticks")
        drain_outcomes(ZipLatest(ScriptedSource(ValueError("x")), ScriptedSource(0), config))
        assert "ticks: upstream failure from left source" in caplog.text


# ---------------------------------------------------------------------------
# Configuration, wakers and housekeeping
# ---------------------------------------------------------------------------


class TestZipLatestObject:
    def test_is_a_stream(self) -> None:
        assert isinstance(zip_latest([1], [2]), Stream)

    def test_clone_applied_per_emission(self) -> None:
        payload = {"bid": 1}
        stream = zip_latest([payload], [0, 1], ZipConfig(clone=copy.copy))
        pairs = drain(stream)

        assert pairs == [({"bid": 1}, 0), ({"bid": 1}, 1)]
        assert pairs[0][0] is not payload
        assert pairs[0][0] is not pairs[1][0]

    def test_values_shared_without_clone(self) -> None:
        payload = {"bid": 1}
        pairs = drain(zip_latest([payload], [0, 1]))
        assert pairs[0][0] is payload
        assert pairs[1][0] is payload

    def test_emitted_counter(self) -> None:
        stream = zip_latest([0, 1, 2], [0])
        drain(stream)
        assert stream.emitted == 3

    def test_waker_forwarded_to_sources(self) -> None:
        left = ScriptedSource(PENDING)
        right = ScriptedSource(PENDING)
        cx = Context(Waker(lambda: None))

        assert ZipLatest(left, right).poll_next(cx) == PENDING
        assert left.waker is cx.waker
        assert right.waker is cx.waker

    def test_close_closes_both_sources(self) -> None:
        left, right = ScriptedSource(), ScriptedSource()
        ZipLatest(left, right).close()
        assert left.closed
        assert right.closed

    def test_finish_is_logged_once(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="ziplatest.stream")
        stream = zip_latest([0, 1], [0])
        drain(stream)
        stream.poll_next(Context.noop())
        assert caplog.text.count("zip_latest: finished after 2 pairs") == 1

    def test_repr_includes_name(self) -> None:
        stream = zip_latest([0], [0], ZipConfig(name="fx"))
        assert "name='fx'" in repr(stream)
        assert "emitted=0" in repr(stream)
