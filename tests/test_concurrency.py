import threading

import pytest

from stamp_tour_service.tour.errors import Unauthorized
from stamp_tour_service.tour.service import SAVE_ALL_COMMAND, TourService


def _race_redeem(service, session_id, workers=2):
    barrier = threading.Barrier(workers)
    outcomes = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            service.redeem(session_id)
        except Unauthorized:
            result = "unauthorized"
        else:
            result = "ok"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)
    return outcomes


@pytest.mark.parametrize("serialize", [False, True])
def test_concurrent_redeem_consumes_once(settings, serialize):
    service = TourService.from_settings(settings.model_copy(update={"serialize_operations": serialize}))
    participant = service.register("Ada")

    for round_number in range(1, 51):
        service.check(participant.id, "B2")
        outcomes = _race_redeem(service, participant.id)

        assert sorted(outcomes) == ["ok", "unauthorized"]
        assert len(service.history.records("B2")) == round_number


def test_many_sessions_redeem_in_parallel(service):
    participants = [service.register(f"runner-{i}") for i in range(20)]
    for participant in participants:
        service.check(participant.id, "C3")

    errors = []

    def redeem(session_id):
        try:
            service.redeem(session_id)
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=redeem, args=(p.id,)) for p in participants]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert errors == []
    assert {r.participant_id for r in service.history.records("C3")} == {p.id for p in participants}
    assert len(service.pending) == 0


def test_concurrent_snapshots_leave_valid_files(service):
    participants = [service.register(f"runner-{i}") for i in range(10)]
    for participant in participants:
        service.check(participant.id, "A1")
        service.redeem(participant.id)

    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def save():
        barrier.wait()
        for _ in range(10):
            result = service.admin(SAVE_ALL_COMMAND)
            with lock:
                results.append(result)

    threads = [threading.Thread(target=save) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert len(results) == 80
    assert all(result.ok for result in results), [r.output for r in results if not r.ok]
    manager = service.persistence
    assert {p.id for p in manager.load_sessions()} == {p.id for p in participants}
    assert len(manager.load_history()["A1"]) == 10
    assert list(manager.data_dir.glob("*.tmp")) == []
