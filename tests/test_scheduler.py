"""Tests for the debounced summary scheduler, using a manual timer."""

from tube2tldr.errors import SummarizationCallError, SummarizationCancelled
from tube2tldr.scheduler import SummaryScheduler


class ManualTimer:
    def __init__(self, delay, fn, args=()):
        self.delay = delay
        self.fn = fn
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def join(self, timeout=None):
        pass

    def fire(self):
        if not self.cancelled:
            self.fn(*self.args)


class TimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, delay, fn, args=()):
        timer = ManualTimer(delay, fn, args)
        self.timers.append(timer)
        return timer


def make_scheduler(run_fn, **kwargs):
    timers = TimerFactory()
    events = {"status": [], "summary": [], "error": [], "level": []}
    scheduler = SummaryScheduler(
        run_fn,
        debounce_seconds=0.5,
        on_status=events["status"].append,
        on_summary=events["summary"].append,
        on_error=events["error"].append,
        on_level=lambda level, text: events["level"].append((level, text)),
        timer_factory=timers,
        **kwargs,
    )
    return scheduler, timers, events


def test_submit_arms_a_daemon_timer():
    scheduler, timers, events = make_scheduler(lambda text, token, on_level: text.upper())

    scheduler.submit("hello")

    timer = timers.timers[0]
    assert timer.started and timer.daemon
    assert timer.delay == 0.5
    assert events["summary"] == []

    timer.fire()
    assert events["status"] == ["Generating summary..."]
    assert events["summary"] == ["HELLO"]
    assert scheduler.last_summary == "HELLO"


def test_new_input_cancels_pending_run():
    calls = []
    scheduler, timers, events = make_scheduler(lambda text, token, on_level: calls.append(text) or text)

    scheduler.submit("first")
    scheduler.submit("second")
    for timer in timers.timers:
        timer.fire()

    assert timers.timers[0].cancelled
    assert calls == ["second"]
    assert events["summary"] == ["second"]


def test_error_keeps_previous_summary():
    outcomes = iter(["good summary", SummarizationCallError("offline")])

    def run(text, token, on_level):
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    scheduler, timers, events = make_scheduler(run)
    scheduler.submit("one")
    timers.timers[-1].fire()
    scheduler.submit("two")
    timers.timers[-1].fire()

    assert scheduler.last_summary == "good summary"
    assert isinstance(scheduler.last_error, SummarizationCallError)
    assert events["summary"] == ["good summary"]
    assert len(events["error"]) == 1


def test_superseded_run_is_not_published():
    scheduler, timers, events = make_scheduler(None)

    def run(text, token, on_level):
        # New input arrives while this run is in flight.
        scheduler.submit("newer")
        return "stale"

    scheduler.run_fn = run
    scheduler.submit("older")
    timers.timers[0].fire()

    assert events["summary"] == []
    assert scheduler.last_summary is None
    assert timers.timers[1].started


def test_cancelled_run_reports_status():
    def run(text, token, on_level):
        raise SummarizationCancelled("stopped")

    scheduler, timers, events = make_scheduler(run)
    scheduler.submit("text")
    timers.timers[0].fire()

    assert events["status"][-1] == "Summary superseded by newer input."
    assert events["error"] == []


def test_cancel_stops_everything():
    scheduler, timers, events = make_scheduler(lambda text, token, on_level: text)
    scheduler.submit("text")
    scheduler.cancel()
    timers.timers[0].fire()

    assert events["summary"] == []


def test_levels_are_published_as_they_finish():
    def run(text, token, on_level):
        on_level(1, "First part. Second part.")
        assert events["level"] == [(1, "First part. Second part.")]
        on_level(2, "Whole video.")
        return "Whole video."

    scheduler, timers, events = make_scheduler(run)
    scheduler.submit("text")
    timers.timers[0].fire()

    assert events["level"] == [(1, "First part. Second part."), (2, "Whole video.")]
    assert events["summary"] == ["Whole video."]


def test_levels_of_a_superseded_run_are_dropped():
    scheduler, timers, events = make_scheduler(None)

    def run(text, token, on_level):
        on_level(1, "old first level")
        scheduler.submit("newer")
        on_level(2, "old final")
        return "old final"

    scheduler.run_fn = run
    scheduler.submit("older")
    timers.timers[0].fire()

    assert events["level"] == [(1, "old first level")]
    assert events["summary"] == []


def test_unexpected_errors_reach_on_error():
    def run(text, token, on_level):
        raise RuntimeError("network went away")

    scheduler, timers, events = make_scheduler(run)
    scheduler.submit("text")
    timers.timers[0].fire()

    assert isinstance(scheduler.last_error, RuntimeError)
    assert len(events["error"]) == 1
    assert events["summary"] == []
