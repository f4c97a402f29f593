from __future__ import annotations

import threading

import schedule

from news_ingest.processing.scheduler import IngestionScheduler


def test_trigger_skips_while_cycle_running() -> None:
    started = threading.Event()
    release = threading.Event()
    calls: list[int] = []

    def _cycle() -> None:
        calls.append(1)
        started.set()
        release.wait(5)

    scheduler = IngestionScheduler(run_cycle=_cycle, interval_minutes=10)
    assert scheduler.trigger() is True
    assert started.wait(5)
    assert scheduler.trigger() is False
    release.set()
    assert scheduler.wait_idle(5) is True
    assert scheduler.trigger() is True
    assert scheduler.wait_idle(5) is True
    assert len(calls) == 2


def test_cycle_exception_does_not_stop_scheduler() -> None:
    def _cycle() -> None:
        raise RuntimeError("boom")

    scheduler = IngestionScheduler(run_cycle=_cycle, interval_minutes=10)
    assert scheduler.trigger() is True
    assert scheduler.wait_idle(5) is True
    assert scheduler.trigger() is True
    assert scheduler.wait_idle(5) is True


def test_install_registers_interval_job() -> None:
    sched = schedule.Scheduler()
    scheduler = IngestionScheduler(run_cycle=lambda: None, interval_minutes=10, scheduler=sched)
    scheduler.install()
    assert len(sched.get_jobs()) == 1
    assert sched.get_jobs()[0].interval == 10


def test_run_forever_runs_on_start_and_stops() -> None:
    ran = threading.Event()
    scheduler = IngestionScheduler(run_cycle=ran.set, interval_minutes=10, run_on_start=True, poll_seconds=0.01)
    loop = threading.Thread(target=scheduler.run_forever)
    loop.start()
    assert ran.wait(5)
    scheduler.stop()
    loop.join(5)
    assert not loop.is_alive()
    assert scheduler.scheduler.get_jobs() == []
