"""Tests for the generator state machine."""

import itertools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum, auto

import pytest

from resumable_generators import (
    EXHAUSTED,
    START,
    DispatchLimitExceeded,
    GeneratorConfig,
    GeneratorDefinition,
    GeneratorExhaustedError,
    GeneratorFactory,
    GeneratorStatus,
    InvalidStepError,
    ReentrantResumeError,
    ResumableGenerator,
    ResumeArgumentError,
    SharedGenerator,
    UnknownPositionError,
    UseAfterTeardownError,
    YieldTypeError,
    entry,
    finish,
    goto,
    is_exhausted,
    on_teardown,
    resumes,
    yield_,
)


class CountTo(GeneratorDefinition):
    returns = int

    class Position(Enum):
        AFTER_YIELD = auto()

    def __init__(self, limit):
        self.limit = limit
        self.count = 1

    @entry
    def check(self):
        if self.count > self.limit:
            return finish()
        return yield_(self.count, at=self.Position.AFTER_YIELD)

    @resumes(Position.AFTER_YIELD)
    def advance(self):
        self.count += 1
        return goto(START)


class OneTwoThree(GeneratorDefinition):
    class Position(Enum):
        ONE = auto()
        TWO = auto()
        THREE = auto()

    def __init__(self, log):
        self.log = log

    @entry
    def start(self):
        return yield_(1, at=self.Position.ONE)

    @resumes(Position.ONE)
    def after_one(self):
        return yield_(2, at=self.Position.TWO)

    @resumes(Position.TWO)
    def after_two(self):
        return yield_(3, at=self.Position.THREE)

    @resumes(Position.THREE)
    def after_three(self):
        return None

    @on_teardown
    def release(self):
        self.log.append("cleanup")


class RunningTotal(GeneratorDefinition):
    params = (int,)
    returns = int

    class Position(Enum):
        ADDED = auto()

    def __init__(self, start=0):
        self.total = start

    @entry
    def add(self, amount):
        self.total += amount
        return yield_(self.total, at=self.Position.ADDED)

    @resumes(Position.ADDED)
    def again(self, amount):
        return goto(START)


class CallsItself(GeneratorDefinition):
    def __init__(self, holder, action="resume"):
        self.holder = holder
        self.action = action

    @entry
    def start(self):
        if self.action == "close":
            self.holder[0].close()
        return self.holder[0]()


class Failing(GeneratorDefinition):
    class Position(Enum):
        FIRST = auto()

    def __init__(self, log):
        self.log = log

    @entry
    def start(self):
        return yield_("first", at=self.Position.FIRST)

    @resumes(Position.FIRST)
    def explode(self):
        raise ValueError("boom")

    @on_teardown
    def release(self):
        self.log.append("cleanup")


class Other(Enum):
    ELSEWHERE = auto()


class Misbehaving(GeneratorDefinition):
    def __init__(self, result):
        self.result = result

    @entry
    def start(self):
        return self.result


class Spinner(GeneratorDefinition):
    @entry
    def start(self):
        return goto(START)


def make(definition, *args, **config):
    return GeneratorFactory(definition, config=GeneratorConfig(**config)).create(*args)


def test_sequence_then_exhaustion_sentinel():
    """Test that k yields come back in order followed by the sentinel."""
    gen = make(CountTo, 4)

    assert [gen(), gen(), gen(), gen()] == [1, 2, 3, 4]
    assert gen() is EXHAUSTED
    assert gen.exhausted
    assert gen.position is EXHAUSTED


def test_scenario_three_yield_sites_then_cleanup_once():
    """Test yields 1, 2, 3, the sentinel, and a single cleanup on teardown."""
    log = []
    gen = make(OneTwoThree, log)

    assert gen() == 1
    assert gen.position is OneTwoThree.Position.ONE
    assert gen() == 2
    assert gen() == 3
    assert gen() is EXHAUSTED
    assert log == []

    gen.close()
    gen.close()
    assert log == ["cleanup"]


def test_first_resume_starts_at_entry():
    """Test that a new generator sits at START until it is resumed."""
    gen = make(CountTo, 1)

    assert gen.position is START
    assert gen.status is GeneratorStatus.CREATED
    assert gen() == 1
    assert gen.status is GeneratorStatus.SUSPENDED
    assert gen.resume_count == 1


def test_empty_body_exhausts_on_first_call():
    """Test that a body with nothing to yield returns the sentinel at once."""
    gen = make(CountTo, 0)

    assert is_exhausted(gen())


def test_sentinel_is_distinct_from_falsy_values():
    """Test that a yielded zero is not mistaken for exhaustion."""
    gen = make(RunningTotal, 0)

    assert gen(0) == 0
    assert not is_exhausted(gen(0))


def test_independent_generators_do_not_interfere():
    """Test that interleaved generators match what each yields alone."""
    factory = GeneratorFactory(CountTo, config=GeneratorConfig())
    first = factory.create(3)
    second = factory.create(3)

    interleaved = [first(), second(), second(), first(), first(), second()]

    assert interleaved == [1, 1, 2, 2, 3, 3]
    assert first() is EXHAUSTED
    assert second() is EXHAUSTED
    assert factory.created == 2


def test_per_call_parameters_reach_the_resumed_arm():
    """Test that each resume sees the arguments of that call."""
    gen = make(RunningTotal, 10)

    assert gen(5) == 15
    assert gen(-3) == 12
    assert gen(100) == 112


def test_per_call_arguments_are_checked():
    """Test that wrong arity or type is rejected before the body runs."""
    gen = make(RunningTotal)

    with pytest.raises(ResumeArgumentError, match="expected 1 per-call argument"):
        gen()
    with pytest.raises(ResumeArgumentError, match="must be int"):
        gen("five")

    assert gen.status is GeneratorStatus.CREATED
    assert gen(1) == 1


def test_yield_type_is_checked():
    """Test that a value of the wrong type is reported, unless checks are off."""
    class Words(GeneratorDefinition):
        returns = int

        class Position(Enum):
            SAID = auto()

        @entry
        def say(self):
            return yield_("hello", at=self.Position.SAID)

        @resumes(Position.SAID)
        def done(self):
            return finish()

    with pytest.raises(YieldTypeError, match="must be int"):
        make(Words)()

    assert make(Words, check_types=False)() == "hello"


def test_resume_after_exhaustion_raises_by_default():
    """Test that an exhausted generator refuses to restart."""
    gen = make(CountTo, 1)
    gen()
    assert gen() is EXHAUSTED

    with pytest.raises(GeneratorExhaustedError, match="after it finished"):
        gen()


def test_resume_after_exhaustion_sentinel_policy():
    """Test that the sentinel policy keeps returning EXHAUSTED."""
    gen = make(CountTo, 1, after_exhaustion="sentinel")
    gen()

    assert gen() is EXHAUSTED
    assert gen() is EXHAUSTED
    assert gen() is EXHAUSTED


def test_use_after_teardown_is_rejected():
    """Test that resuming a torn-down generator fails whatever its state."""
    for consumed in range(0, 5):
        gen = make(OneTwoThree, [])
        for _ in range(consumed):
            gen()
        gen.close()

        assert gen.closed
        with pytest.raises(UseAfterTeardownError):
            gen()


def test_body_exception_propagates_and_exhausts():
    """Test that a failing arm surfaces its error and ends the generator."""
    log = []
    gen = make(Failing, log)

    assert gen() == "first"
    with pytest.raises(ValueError, match="boom"):
        gen()

    assert gen.exhausted
    with pytest.raises(GeneratorExhaustedError):
        gen()

    gen.close()
    assert log == ["cleanup"]


def test_reentrant_resume_is_rejected():
    """Test that a body resuming its own generator gets a definite error."""
    holder = []
    gen = make(CallsItself, holder)
    holder.append(gen)

    with pytest.raises(ReentrantResumeError, match="already running"):
        gen()
    assert gen.exhausted


def test_close_while_running_is_rejected():
    """Test that a body cannot tear down its own generator."""
    holder = []
    gen = make(CallsItself, holder, "close")
    holder.append(gen)

    with pytest.raises(ReentrantResumeError, match="while running"):
        gen()
    gen.close()
    assert gen.closed


def test_invalid_step_is_reported():
    """Test that an arm returning a plain value is an error."""
    with pytest.raises(InvalidStepError, match="returned 42"):
        make(Misbehaving, 42)()


def test_foreign_position_is_reported():
    """Test that yielding at a position from another enum is an error."""
    with pytest.raises(UnknownPositionError, match="ELSEWHERE"):
        make(Misbehaving, yield_(1, at=Other.ELSEWHERE))()


def test_exhaustion_sentinel_cannot_be_yielded():
    """Test that the sentinel is never handed out as a value."""
    class Sneaky(GeneratorDefinition):
        class Position(Enum):
            SENT = auto()

        @entry
        def start(self):
            return yield_(EXHAUSTED, at=self.Position.SENT)

        @resumes(Position.SENT)
        def done(self):
            return finish()

    with pytest.raises(YieldTypeError, match="sentinel"):
        make(Sneaky)()


def test_dispatch_limit():
    """Test that a body jumping forever is stopped."""
    gen = make(Spinner, max_dispatch_hops=5)

    with pytest.raises(DispatchLimitExceeded, match="more than 5 jumps"):
        gen()


def test_iteration_adapter():
    """Test that zero-parameter generators work in for loops."""
    assert list(make(CountTo, 5)) == [1, 2, 3, 4, 5]


def test_iteration_rejects_parameterised_generators():
    """Test that generators needing arguments cannot be iterated."""
    with pytest.raises(ResumeArgumentError, match="cannot be iterated"):
        iter(make(RunningTotal))


def test_shared_generator_serialises_threads():
    """Test that a locked generator hands each value to exactly one thread."""
    shared = SharedGenerator(make(CountTo, 400))
    seen = []
    lock = threading.Lock()

    def drain():
        for _ in range(100):
            value = shared()
            with lock:
                seen.append(value)

    with ThreadPoolExecutor(max_workers=4) as executor:
        for future in [executor.submit(drain) for _ in range(4)]:
            future.result()

    assert sorted(seen) == list(range(1, 401))
    assert shared() is EXHAUSTED
    shared.close()
    assert shared.generator.closed


def test_iterator_keeps_stopping_after_exhaustion():
    """Test that a finished iterator raises StopIteration on every later call."""
    gen = make(CountTo, 2)
    it = iter(gen)

    assert list(it) == [1, 2]
    assert next(it, "done") == "done"
    assert next(it, "done") == "done"
    assert list(zip(it, itertools.count())) == []

    with pytest.raises(GeneratorExhaustedError):
        gen()


def test_iterating_an_exhausted_generator_is_empty():
    """Test that a new iterator over a finished generator yields nothing."""
    gen = make(CountTo, 1)
    assert list(gen) == [1]

    assert list(itertools.chain(gen, [99])) == [99]


def test_body_failure_is_logged_with_traceback(caplog):
    """Test that a failing arm is logged at ERROR with exception info."""
    gen = make(Failing, [])
    gen()

    with caplog.at_level(logging.ERROR, logger="resumable_generators.machine"):
        with pytest.raises(ValueError, match="boom"):
            gen()

    records = [r for r in caplog.records if "body failed" in r.getMessage()]
    assert len(records) == 1
    assert records[0].levelno == logging.ERROR
    assert records[0].exc_info is not None
    assert records[0].exc_info[0] is ValueError


def test_direct_construction_reads_environment(monkeypatch):
    """Test that a generator built without a factory uses the env config."""
    monkeypatch.setenv("RESUMABLE_AFTER_EXHAUSTION", "sentinel")
    gen = ResumableGenerator(CountTo(1))

    assert gen() == 1
    assert gen() is EXHAUSTED
    assert gen() is EXHAUSTED
