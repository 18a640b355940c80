"""Tests for core/ticker.py — one cancellable tick source while fasting."""

from core.ticker import FastTicker


class FakeTimer:
    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeScheduler:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, callback):
        timer = FakeTimer(interval, callback)
        self.timers.append(timer)
        return timer

    def live(self):
        return [t for t in self.timers if not t.stopped]


def test_starts_only_when_fasting():
    scheduler = FakeScheduler()
    ticks = []
    ticker = FastTicker(scheduler, lambda: ticks.append(1))

    ticker.sync(False)
    assert scheduler.timers == []
    assert not ticker.running

    ticker.sync(True)
    assert ticker.running
    assert len(scheduler.live()) == 1
    assert scheduler.timers[0].interval == 1.0
    assert ticks == [1]  # immediate refresh on entry


def test_at_most_one_timer():
    scheduler = FakeScheduler()
    ticker = FastTicker(scheduler, lambda: None)
    ticker.sync(True)
    ticker.sync(True)
    ticker.sync(True)
    assert len(scheduler.timers) == 1


def test_stops_on_exit_and_restarts_on_entry():
    scheduler = FakeScheduler()
    ticker = FastTicker(scheduler, lambda: None)
    ticker.sync(True)
    ticker.sync(False)
    assert scheduler.timers[0].stopped
    assert not ticker.running

    ticker.sync(True)
    assert len(scheduler.timers) == 2
    assert len(scheduler.live()) == 1


def test_stop_is_idempotent():
    scheduler = FakeScheduler()
    ticker = FastTicker(scheduler, lambda: None)
    ticker.stop()
    ticker.sync(True)
    ticker.stop()
    ticker.stop()
    assert scheduler.live() == []
