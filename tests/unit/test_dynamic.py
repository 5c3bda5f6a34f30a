"""Unit tests for flat_map and flat_map_latest."""

import pytest

from eventstream import Emitter, EventStream, Value, from_iterable


class ChildFactory:
    """Builds labelled child streams and logs their lifecycle."""

    def __init__(self):
        self.log = []
        self.emitters = {}

    def __call__(self, label):
        emitter = Emitter(label)
        self.emitters[label] = emitter
        log = self.log

        def start(handler):
            log.append(("start", label))
            stop = emitter._start(handler)

            def logged_stop():
                log.append(("stop", label))
                stop()

            return logged_stop

        return EventStream(start=start, name=label)


@pytest.fixture
def children():
    return ChildFactory()


@pytest.mark.unit
@pytest.mark.combinators
class TestFlatMap:
    def test_forwards_values_from_every_child(self, emitter, children, recorder):
        """Children run concurrently and their values are merged."""
        recorder.subscribe_to(emitter.stream.flat_map(children))

        emitter.emit("c1")
        emitter.emit("c2")
        children.emitters["c1"].emit(1)
        children.emitters["c2"].emit(2)
        children.emitters["c1"].emit(3)

        assert recorder.values == [1, 2, 3]

    def test_unsubscribe_stops_children_in_order_then_parent(self, children):
        """External unsubscribe stops all children, oldest first, then the parent."""

        def parent_start(handler):
            children.log.append(("start", "parent"))
            parent.handler = handler

            def stop():
                children.log.append(("stop", "parent"))

            return stop

        parent = EventStream(start=parent_start, name="parent")
        subscription = parent.flat_map(children).subscribe(lambda v: None)

        parent.handler(Value("c1"))
        parent.handler(Value("c2"))
        subscription()

        assert children.log == [
            ("start", "parent"),
            ("start", "c1"),
            ("start", "c2"),
            ("stop", "c1"),
            ("stop", "c2"),
            ("stop", "parent"),
        ]

    def test_child_end_does_not_end_parent(self, emitter, children, recorder):
        """A child that finishes is dropped; the parent keeps going."""
        subscription = recorder.subscribe_to(emitter.stream.flat_map(children))

        emitter.emit("c1")
        children.emitters["c1"].emit("a")
        children.emitters["c1"].end()
        emitter.emit("c2")
        children.emitters["c2"].emit("b")
        subscription()

        assert recorder.values == ["a", "b"]
        assert not recorder.ended
        # c1 ended on its own, so only c2 is stopped by the unsubscribe
        assert children.log.count(("stop", "c1")) == 1
        assert children.log.count(("stop", "c2")) == 1

    def test_child_errors_reach_parent_error_channel(self, emitter, children, recorder):
        """Errors from a child are forwarded, not swallowed."""
        recorder.subscribe_to(emitter.stream.flat_map(children))

        emitter.emit("c1")
        children.emitters["c1"].error(RuntimeError("child failed"))
        children.emitters["c1"].emit("still alive")

        assert [str(error) for error in recorder.errors] == ["child failed"]
        assert recorder.values == ["still alive"]

    def test_child_transform_errors_reach_parent(self, emitter, recorder):
        """Errors raised inside a child's own pipeline are forwarded."""
        recorder.subscribe_to(
            emitter.stream.flat_map(lambda xs: from_iterable(xs).map(lambda x: 1 / x))
        )

        emitter.emit([1, 0, 2])

        assert recorder.values == [1.0, 0.5]
        assert len(recorder.errors) == 1
        assert isinstance(recorder.errors[0], ZeroDivisionError)

    def test_function_errors_are_isolated(self, emitter, recorder):
        """A failing child factory reports an error and the parent continues."""

        def build(value):
            if value < 0:
                raise ValueError("negative")
            return from_iterable([value])

        recorder.subscribe_to(emitter.stream.flat_map(build))

        emitter.emit(-1)
        emitter.emit(4)

        assert recorder.values == [4]
        assert len(recorder.errors) == 1

    def test_function_must_return_a_stream(self, emitter, recorder):
        """Returning something else is reported as a TypeError."""
        recorder.subscribe_to(emitter.stream.flat_map(lambda value: [value]))

        emitter.emit(1)

        assert recorder.values == []
        assert isinstance(recorder.errors[0], TypeError)

    def test_parent_end_stops_children(self, emitter, children, recorder):
        """When the parent ends, every active child is stopped."""
        recorder.subscribe_to(emitter.stream.take(2).flat_map(children))

        emitter.emit("c1")
        emitter.emit("c2")

        assert recorder.ended
        assert children.emitters["c1"].listener_count == 0
        assert children.emitters["c2"].listener_count == 0

    def test_synchronous_children_complete_inline(self, recorder):
        """Children that end during subscribe are never tracked."""
        recorder.subscribe_to(
            from_iterable([1, 2]).flat_map(lambda n: from_iterable(range(n)))
        )

        assert recorder.values == [0, 0, 1]
        assert recorder.end_count == 1

    def test_limit_stops_oldest_child(self, emitter, children):
        """With limit=2, a third child replaces the first."""
        emitter.stream.flat_map(children, limit=2).subscribe(lambda v: None)

        emitter.emit("c1")
        emitter.emit("c2")
        emitter.emit("c3")

        assert children.log == [
            ("start", "c1"),
            ("start", "c2"),
            ("stop", "c1"),
            ("start", "c3"),
        ]

    def test_limit_must_be_positive(self, emitter):
        """A limit below one is rejected."""
        with pytest.raises(ValueError):
            emitter.stream.flat_map(lambda v: v, limit=0)

    def test_child_that_ends_parent_while_starting_is_stopped(
        self, emitter, producer, recorder
    ):
        """A child whose first value ends the parent is released right away."""

        def eager_child(handler):
            stop = producer(handler)
            handler("first")
            return stop

        subscription = recorder.subscribe_to(
            emitter.stream.flat_map(lambda _: EventStream(eager_child)).take(1)
        )
        emitter.emit(0)

        assert recorder.values == ["first"]
        assert recorder.end_count == 1
        assert producer.stop_count == 1
        assert not producer.active

        subscription()
        assert producer.stop_count == 1

    def test_child_values_after_parent_closed_are_dropped(self, emitter):
        """Nothing a starting child emits after the parent ended moves downstream."""
        seen = []

        def eager_child(handler):
            handler("first")
            handler("second")
            return lambda: None

        stream = emitter.stream.flat_map(lambda _: EventStream(eager_child))
        stream.tap(seen.append).take(1).subscribe(lambda v: None)
        emitter.emit(0)

        assert seen == ["first"]


@pytest.mark.unit
@pytest.mark.combinators
class TestFlatMapLatest:
    def test_new_child_stops_previous_before_starting(self, emitter, children, recorder):
        """C1 is stopped before C2 starts; only one child is ever active."""
        recorder.subscribe_to(emitter.stream.flat_map_latest(children))

        emitter.emit("c1")
        children.emitters["c1"].emit("from c1")
        emitter.emit("c2")
        children.emitters["c1"].emit("stale")
        children.emitters["c2"].emit("from c2")

        assert children.log == [("start", "c1"), ("stop", "c1"), ("start", "c2")]
        assert recorder.values == ["from c1", "from c2"]
        assert children.emitters["c1"].listener_count == 0

    def test_finished_child_is_not_stopped_again(self, emitter, children):
        """A child that already ended is not stopped when replaced."""
        emitter.stream.flat_map_latest(children).subscribe(lambda v: None)

        emitter.emit("c1")
        children.emitters["c1"].end()
        emitter.emit("c2")

        assert children.log == [("start", "c1"), ("stop", "c1"), ("start", "c2")]

    def test_unsubscribe_stops_current_child(self, emitter, children):
        """Unsubscribing the parent stops the active child."""
        subscription = emitter.stream.flat_map_latest(children).subscribe(lambda v: None)

        emitter.emit("c1")
        subscription()

        assert children.emitters["c1"].listener_count == 0
        assert emitter.listener_count == 0
