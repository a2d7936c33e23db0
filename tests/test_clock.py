"""
动画时钟与帧调度测试
"""

import pytest

from core.clock import AnimationClock
from core.scheduler import LoopScheduler, ManualScheduler


class FakeTime:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_clock_continues_from_current_time():
    fake = FakeTime()
    clock = AnimationClock(time_source=fake)

    clock.start()
    fake.now += 2.0
    assert clock.tick() == pytest.approx(2.0)

    clock.stop()
    fake.now += 50.0
    assert clock.tick() == pytest.approx(2.0)

    clock.start()
    fake.now += 1.0
    assert clock.tick() == pytest.approx(3.0)


def test_clock_set_time_and_reset():
    fake = FakeTime()
    clock = AnimationClock(time_source=fake)

    clock.set_time(5)
    assert clock.current_time == 5

    clock.start()
    fake.now += 1.0
    clock.set_time(7.5)
    fake.now += 0.5
    assert clock.tick() == pytest.approx(8.0)

    clock.reset()
    assert clock.current_time == 0
    fake.now += 0.25
    assert clock.tick() == pytest.approx(0.25)


def test_display_time_wraps_without_resetting_clock():
    clock = AnimationClock(time_source=FakeTime(), loop_window=10.0)
    clock.set_time(12.5)
    assert clock.display_time == pytest.approx(2.5)
    assert clock.current_time == 12.5


def test_clock_rejects_invalid_loop_window():
    with pytest.raises(ValueError):
        AnimationClock(loop_window=0)


def test_manual_scheduler_frames():
    scheduler = ManualScheduler(frame_interval=0.5)
    calls = []

    def callback():
        calls.append(scheduler.now())
        scheduler.request_frame(callback)

    scheduler.request_frame(callback)
    assert scheduler.run_frames(3) == 3
    assert calls == [0.5, 1.0, 1.5]


def test_manual_scheduler_cancel_is_idempotent():
    scheduler = ManualScheduler()
    calls = []
    handle = scheduler.request_frame(lambda: calls.append(1))
    scheduler.cancel(handle)
    scheduler.cancel(handle)
    scheduler.cancel(None)
    assert scheduler.run_frame() == 0
    assert calls == []
    assert scheduler.pending == 0


def test_manual_scheduler_timers_fire_in_due_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(0.3, lambda: calls.append("late"))
    scheduler.call_later(0.1, lambda: calls.append("early"))

    scheduler.advance(0.05)
    assert calls == []
    scheduler.advance(0.3)
    assert calls == ["early", "late"]


def test_loop_scheduler_runs_requested_frames():
    scheduler = LoopScheduler(frame_rate=1000)
    count = []

    def callback():
        count.append(1)
        scheduler.request_frame(callback)

    scheduler.request_frame(callback)
    assert scheduler.run(max_frames=3) == 3
    assert len(count) == 3


def test_loop_scheduler_exits_when_idle():
    scheduler = LoopScheduler(frame_rate=1000)
    assert scheduler.run() == 0

    calls = []
    scheduler.request_frame(lambda: calls.append(1))
    assert scheduler.run() == 1
    assert calls == [1]


def test_loop_scheduler_rejects_invalid_frame_rate():
    with pytest.raises(ValueError):
        LoopScheduler(frame_rate=0)
