"""Tests for handles module."""

import copy
import gc
import types

import pytest

from lazy_generator import (
    Generator,
    GeneratorMisuseError,
    ProducerDefinitionError,
    WeakGeneratorHandle,
    generator,
)


def counting(limit):
    for i in range(limit):
        yield i


def tracked(tracker, values):
    with tracker.hold():
        for value in values:
            yield value


def fails_after_two():
    yield "v1"
    yield "v2"
    raise ValueError("producer broke")


def test_construction_does_not_run_producer(tracker):
    """Test that the producer body waits for the first advance."""
    gen = Generator(tracked, tracker, [1, 2])

    assert tracker.acquired == 0
    assert not gen.has_value()
    assert not gen.is_done()

    assert gen.advance() is True
    assert tracker.acquired == 1


def test_construction_binds_arguments():
    """Test that bad producer arguments fail at construction."""
    with pytest.raises(TypeError):
        Generator(counting)


def wrapping(producer):
    yield producer


def test_construction_forwards_producer_keyword():
    """Test that a keyword named producer reaches the producer function."""
    gen = Generator(wrapping, producer="x")

    assert list(gen) == ["x"]


def test_advance_yields_values_in_order():
    """Test stepping through a producer with explicit advances."""
    gen = Generator(counting, 3)

    seen = []
    while gen.advance():
        assert not gen.is_done()
        seen.append(gen.current_value)

    assert seen == [0, 1, 2]
    assert gen.is_done()
    assert not gen.has_value()


def test_advance_on_done_generator_is_noop():
    """Test that advancing a finished generator keeps returning False."""
    gen = Generator(counting, 1)
    list(gen)

    assert gen.advance() is False
    assert gen.advance() is False
    assert gen.is_done()


def test_native_iteration():
    """Test that a generator works in for loops and list()."""
    assert list(Generator(counting, 4)) == [0, 1, 2, 3]
    assert list(Generator(counting, 0)) == []


def test_current_value_before_first_value_fails_fast():
    """Test that reading before production is a misuse."""
    gen = Generator(counting, 3)

    with pytest.raises(GeneratorMisuseError, match="no current value"):
        gen.current_value


def test_current_value_or_default():
    """Test non-failing access to the current value."""
    gen = Generator(counting, 1)

    assert gen.current_value_or("missing") == "missing"
    gen.advance()
    assert gen.current_value_or("missing") == 0
    gen.advance()
    assert gen.current_value_or() is None


def test_empty_generator_fails_fast():
    """Test that an empty handle rejects every operation."""
    gen = Generator()

    assert not gen
    assert gen.current_value_or(7) == 7
    with pytest.raises(GeneratorMisuseError, match="empty generator"):
        gen.advance()
    with pytest.raises(GeneratorMisuseError, match="empty generator"):
        gen.is_done()
    with pytest.raises(GeneratorMisuseError, match="empty generator"):
        gen.begin()


def test_dropping_last_handle_releases_resources(tracker):
    """Test that abandoning a generator mid-stream unwinds the producer."""
    gen = Generator(tracked, tracker, [1, 2, 3])
    gen.advance()
    gen.advance()
    assert (tracker.acquired, tracker.released) == (1, 0)

    del gen
    gc.collect()

    assert tracker.released == tracker.acquired == 1


def test_release_tears_down_producer(tracker):
    """Test that releasing the only owner unwinds the producer."""
    gen = Generator(tracked, tracker, [1, 2, 3])
    gen.advance()

    gen.release()

    assert not gen
    assert tracker.released == 1


class RecordOwner:
    """Object whose generator produces from one of its own methods."""

    def __init__(self, tracker):
        self.tracker = tracker
        self.records = Generator(self.produce)

    def produce(self):
        with self.tracker.hold():
            yield from range(3)


def test_release_unwinds_generator_owned_through_a_cycle(tracker):
    """Test that release() tears down a producer its owner also references."""
    owner = RecordOwner(tracker)
    owner.records.advance()

    gc.disable()
    try:
        owner.records.release()
        assert tracker.released == 1
    finally:
        gc.enable()


def test_context_manager_unwinds_generator_owned_through_a_cycle(tracker):
    """Test that a with block tears down a self-referencing producer."""
    owner = RecordOwner(tracker)

    gc.disable()
    try:
        with owner.records as records:
            assert records.advance()
        assert tracker.released == 1
    finally:
        gc.enable()


def test_context_manager_releases_on_exit(tracker):
    """Test using a generator as context manager."""
    with Generator(tracked, tracker, [1, 2, 3]) as gen:
        assert gen.advance()
        assert gen.current_value == 1
        assert tracker.released == 0

    assert tracker.released == 1


def test_unstarted_generator_teardown_acquires_nothing(tracker):
    """Test that dropping an unstarted generator never runs the producer."""
    gen = Generator(tracked, tracker, [1])
    del gen
    gc.collect()

    assert (tracker.acquired, tracker.released) == (0, 0)


def test_aliases_share_one_stream(tracker):
    """Test that shared handles observe and keep alive the same stream."""
    gen = Generator(tracked, tracker, [1, 2, 3])
    alias = gen.share()
    clone = copy.copy(gen)

    gen.advance()
    assert alias.current_value == 1
    alias.advance()
    assert clone.current_value == 2

    gen.release()
    alias.release()
    assert tracker.released == 0

    assert clone.advance()
    assert clone.current_value == 3
    clone.release()
    assert tracker.released == 1


def test_failure_surfaces_once_on_advance():
    """Test that a producer failure is re-raised once after its values."""
    gen = Generator(fails_after_two)

    assert gen.advance()
    assert gen.current_value == "v1"
    assert gen.advance()
    assert gen.current_value == "v2"

    with pytest.raises(ValueError, match="producer broke"):
        gen.advance()

    assert gen.is_done()
    assert gen.advance() is False
    assert list(gen) == []


def test_failure_surfaces_during_native_iteration():
    """Test that a for loop sees all values and then the failure."""
    gen = Generator(fails_after_two)
    seen = []

    with pytest.raises(ValueError, match="producer broke"):
        for value in gen:
            seen.append(value)

    assert seen == ["v1", "v2"]
    assert gen.is_done()


def test_failure_releases_producer_resources(tracker):
    """Test that a failing producer still runs its cleanup."""

    def tracked_failure():
        with tracker.hold():
            yield 1
            raise ValueError("failed while holding")

    gen = Generator(tracked_failure)
    gen.advance()

    with pytest.raises(ValueError):
        gen.advance()

    assert tracker.released == 1


def test_failure_absorbed_when_propagation_disabled():
    """Test that disabled propagation reports ordinary completion."""
    gen = generator(propagate_failures=False)(fails_after_two)()

    assert list(gen) == ["v1", "v2"]
    assert gen.is_done()
    assert gen.advance() is False


def test_propagation_flag_read_from_environment(monkeypatch):
    """Test that the configured default applies to new generators."""
    monkeypatch.setenv("LAZY_GENERATOR_PROPAGATE_FAILURES", "false")

    gen = Generator(fails_after_two)

    assert list(gen) == ["v1", "v2"]
    assert gen.is_done()


def test_decorator_builds_generators():
    """Test that the decorator returns a factory of generators."""

    @generator
    def squares(limit):
        for i in range(limit):
            yield i * i

    gen = squares(4)

    assert isinstance(gen, Generator)
    assert squares.__name__ == "squares"
    assert list(gen) == [0, 1, 4, 9]


def test_decorator_propagation_override(monkeypatch):
    """Test that an explicit flag wins over the environment."""
    monkeypatch.setenv("LAZY_GENERATOR_PROPAGATE_FAILURES", "false")

    gen = generator(propagate_failures=True)(fails_after_two)()

    with pytest.raises(ValueError):
        list(gen)


def test_async_producers_rejected():
    """Test that producers able to await are rejected when built."""

    async def coroutine_producer():
        return 1

    async def async_gen_producer():
        yield 1

    @types.coroutine
    def legacy_coroutine():
        yield

    for producer in (coroutine_producer, async_gen_producer, legacy_coroutine):
        with pytest.raises(ProducerDefinitionError):
            Generator(producer)
        with pytest.raises(ProducerDefinitionError):
            generator(producer)


def test_non_generator_producers_rejected():
    """Test that plain callables are not accepted as producers."""
    with pytest.raises(ProducerDefinitionError, match="not a generator function"):
        Generator(lambda: iter([1, 2]))
    with pytest.raises(TypeError):
        generator(len)


def test_bound_method_producer():
    """Test that generator methods work as producers."""

    class Source:
        def __init__(self, values):
            self.values = values

        def produce(self):
            yield from self.values

    assert list(Generator(Source(["a", "b"]).produce)) == ["a", "b"]


def test_reentrant_advance_fails_fast():
    """Test that a producer advancing its own generator is a misuse."""
    holder = []

    def reentrant():
        yield 1
        holder[0].advance()
        yield 2

    gen = Generator(reentrant)
    holder.append(gen.share())
    gen.advance()

    with pytest.raises(GeneratorMisuseError):
        gen.advance()

    assert gen.is_done()


def test_weak_handle_of_generator():
    """Test obtaining a weak handle from a generator."""
    gen = Generator(counting, 2)
    weak = gen.get_weak_handle()

    assert isinstance(weak, WeakGeneratorHandle)
    assert weak
    assert weak.pin().advance()
    assert gen.current_value == 0
