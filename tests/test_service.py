import pytest

from conftest import write_catalog
from stamp_tour_service.config import Settings
from stamp_tour_service.tour.errors import InvariantViolation, NotFound, Unauthorized
from stamp_tour_service.tour.service import REDEEM_PATH, TourService


def test_register_creates_distinct_participants(service):
    first = service.register("Ada")
    second = service.register("Ada")

    assert first.display_name == "Ada"
    assert second.display_name == "Ada"
    assert first.id != second.id
    assert first.id in service.sessions
    assert service.sessions.get(second.id) == second


def test_redeem_without_check_is_unauthorized(service):
    participant = service.register("Ada")

    with pytest.raises(Unauthorized):
        service.redeem(participant.id)
    with pytest.raises(Unauthorized):
        service.redeem(None)
    with pytest.raises(Unauthorized):
        service.redeem("")


def test_check_then_redeem_appends_exactly_once(service):
    participant = service.register("Ada")

    service.check(participant.id, "A1")
    redemption = service.redeem(participant.id)

    assert redemption.checkpoint_id == "A1"
    assert redemption.checkpoint.name == "Welcome desk"
    records = service.history.records("A1")
    assert len(records) == 1
    assert records[0].participant_id == participant.id
    assert records[0].participant_name == "Ada"

    with pytest.raises(Unauthorized):
        service.redeem(participant.id)
    assert len(service.history.records("A1")) == 1


def test_last_check_wins(service):
    participant = service.register("Ada")

    service.check(participant.id, "A1")
    service.check(participant.id, "B2")
    service.redeem(participant.id)

    assert service.history.records("A1") == []
    assert len(service.history.records("B2")) == 1


def test_same_checkpoint_can_be_redeemed_repeatedly(service):
    participant = service.register("Ada")

    for _ in range(3):
        service.check(participant.id, "C3")
        service.redeem(participant.id)

    assert [r.participant_id for r in service.history.records("C3")] == [participant.id] * 3


def test_check_receipt_is_uniform_across_outcomes(service):
    participant = service.register("Ada")

    receipts = [
        service.check(None, "A1"),
        service.check("not-a-session", "A1"),
        service.check(participant.id, "nope"),
        service.check(participant.id, None),
        service.check(participant.id, "A1"),
    ]

    assert {type(receipt) for receipt in receipts} == {type(receipts[-1])}
    for receipt in receipts:
        path, _, query = receipt.location.partition("?")
        assert path == REDEEM_PATH
        assert query.startswith("random=")
    assert len({receipt.location for receipt in receipts}) == len(receipts)


def test_rejected_checks_leave_no_pending_state(service):
    participant = service.register("Ada")

    service.check(None, "A1")
    service.check("not-a-session", "A1")
    service.check(participant.id, "unknown")

    assert len(service.pending) == 0
    with pytest.raises(Unauthorized):
        service.redeem(participant.id)


def test_unknown_checkpoint_keeps_previous_pending_entry(service):
    participant = service.register("Ada")

    service.check(participant.id, "A1")
    service.check(participant.id, "unknown")

    assert service.pending.peek(participant.id) == "A1"


def test_pending_entry_without_participant_fails_loudly(service):
    service.pending.put("ghost", "A1")

    with pytest.raises(InvariantViolation):
        service.redeem("ghost")


def test_empty_checkpoint_id_is_not_found(tmp_path):
    resources = tmp_path / "resources"
    write_catalog(resources, [{"stampId": "", "stampName": "Blank"}])
    service = TourService.from_settings(Settings(resources_dir=resources, data_dir=tmp_path / "data"))
    participant = service.register("Ada")

    service.check(participant.id, "")
    with pytest.raises(NotFound):
        service.redeem(participant.id)
    assert len(service.history.records("")) == 1


def test_unrecognized_admin_command_changes_nothing(service, settings):
    result = service.admin("drop tables")

    assert result.ok
    assert result.output == "Command not found"
    assert not (settings.data_dir / "stamp_status.json").exists()
    assert not (settings.data_dir / "user_status.json").exists()
