from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, time

import pytest

from src.classroom_attendance.classroom_attendance.attendance.service import AttendanceSubmission, normalize_beacon_id
from src.classroom_attendance.classroom_attendance.classes.model import ClassLocation
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus, Entity
from src.classroom_attendance.classroom_attendance.core.exceptions import (
    AlreadyMarkedError,
    BeaconMismatchError,
    CodeMismatchError,
    MisconfiguredError,
    NotFoundError,
    OutOfRangeError,
    TooEarlyError,
    WindowExpiredError,
)

VALID = AttendanceSubmission(
    roll_number="21CS001",
    class_name="CSE-A",
    class_code="OS-0900",
    latitude=17.3850,
    longitude=78.4867,
    beacon_id="ABC123",
)


def test_valid_submission_creates_one_present_record(container, attendance, clock):
    receipt = container.attendance_service.submit(VALID)

    assert receipt.class_name == "CSE-A"
    assert receipt.subject == "Operating Systems"
    assert receipt.date == "2026-10-18"
    assert receipt.to_dict()["time"] == "2026-10-18T03:35:00.000Z"

    assert len(attendance.records) == 1
    rec = attendance.records[0]
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.class_code == "OS-0900"
    assert rec.marked_at == clock.now()
    assert rec.attendance_date == date(2026, 10, 18)


def test_unknown_student_is_not_found(container, attendance):
    with pytest.raises(NotFoundError) as exc:
        container.attendance_service.submit(replace(VALID, roll_number="nobody"))

    assert exc.value.entity == Entity.STUDENT
    assert attendance.insert_attempts == 0


def test_unknown_class_code_is_not_found(container):
    with pytest.raises(NotFoundError) as exc:
        container.attendance_service.submit(replace(VALID, class_code="NOPE"))

    assert exc.value.entity == Entity.CLASS
    assert exc.value.http_status == 404


def test_location_lookup_ignores_case(container, attendance):
    container.attendance_service.submit(replace(VALID, class_name="cse-a"))

    assert len(attendance.records) == 1
    assert attendance.records[0].class_name == "CSE-A"


def test_missing_location_is_not_found(container):
    with pytest.raises(NotFoundError) as exc:
        container.attendance_service.submit(replace(VALID, class_name="CSE-B"))

    assert exc.value.entity == Entity.LOCATION


def test_outside_geofence_is_rejected_without_write(container, attendance):
    # ~111 m north of the classroom, radius is 50 m
    with pytest.raises(OutOfRangeError) as exc:
        container.attendance_service.submit(replace(VALID, latitude=17.3860))

    assert 100 < exc.value.distance < 125
    assert exc.value.details()["allowedRadius"] == 50
    assert exc.value.details()["distance"] == round(exc.value.distance)
    assert attendance.insert_attempts == 0


def test_just_inside_geofence_is_accepted(container, attendance):
    # ~33 m away
    container.attendance_service.submit(replace(VALID, latitude=17.3853))

    assert len(attendance.records) == 1


def test_beacon_match_ignores_case_and_whitespace(container, locations, attendance):
    locations.locations[0] = replace(locations.locations[0], beacon_id="abc123")

    container.attendance_service.submit(replace(VALID, beacon_id=" ABC123 "))

    assert len(attendance.records) == 1


def test_missing_beacon_config_is_misconfigured(container, locations, attendance):
    locations.locations[0] = replace(locations.locations[0], beacon_id="   ")

    with pytest.raises(MisconfiguredError) as exc:
        container.attendance_service.submit(VALID)

    assert exc.value.component == "beacon"
    assert attendance.insert_attempts == 0


@pytest.mark.parametrize("received", [None, "", "XYZ999"])
def test_absent_or_wrong_beacon_is_rejected(container, attendance, received):
    with pytest.raises(BeaconMismatchError) as exc:
        container.attendance_service.submit(replace(VALID, beacon_id=received))

    assert exc.value.details() == {"expectedBeaconId": "ABC123", "receivedBeaconId": received}
    assert attendance.insert_attempts == 0


def test_geofence_is_checked_before_beacon(container):
    with pytest.raises(OutOfRangeError):
        container.attendance_service.submit(replace(VALID, latitude=18.0, beacon_id=None))


def test_class_code_must_match_stored_code_exactly(container, classes, attendance):
    # Lookup found the class, but the stored code differs from what was sent.
    classes.classes[0] = replace(classes.classes[0], class_code="os-0900")
    classes.get_by_code = lambda code: classes.classes[0]

    with pytest.raises(CodeMismatchError) as exc:
        container.attendance_service.submit(VALID)

    assert exc.value.details() == {"expected": "os-0900"}
    assert attendance.insert_attempts == 0


def test_submission_at_exact_start_succeeds(container, clock, attendance):
    clock.set(9, 0, 0)
    container.attendance_service.submit(VALID)
    assert len(attendance.records) == 1


def test_submission_at_window_end_succeeds(container, clock, attendance):
    clock.set(9, 15, 0)
    container.attendance_service.submit(VALID)
    assert len(attendance.records) == 1


def test_submission_one_second_after_window_expires(container, clock, attendance):
    clock.set(9, 15, 1)
    with pytest.raises(WindowExpiredError) as exc:
        container.attendance_service.submit(VALID)

    assert exc.value.minutes_late == 0
    assert attendance.insert_attempts == 0


def test_minutes_late_is_reported(container, clock):
    clock.set(9, 40, 30)
    with pytest.raises(WindowExpiredError) as exc:
        container.attendance_service.submit(VALID)

    assert exc.value.details() == {"minutesLate": 25}


def test_too_early_reports_minutes_until_start_rounded_up(container, clock, attendance):
    clock.set(8, 57, 30)
    with pytest.raises(TooEarlyError) as exc:
        container.attendance_service.submit(VALID)

    assert exc.value.minutes_until_start == 3
    assert attendance.insert_attempts == 0


def test_resubmission_is_already_marked(container, attendance, clock):
    container.attendance_service.submit(VALID)
    clock.set(9, 10)

    with pytest.raises(AlreadyMarkedError):
        container.attendance_service.submit(VALID)

    assert len(attendance.records) == 1


def test_duplicate_guard_relies_on_insert_not_on_prior_read(container, attendance):
    def _no_reads(**kwargs):
        raise AssertionError("submit must not read before inserting")

    attendance.get_for_student_class_on = _no_reads

    container.attendance_service.submit(VALID)
    with pytest.raises(AlreadyMarkedError):
        container.attendance_service.submit(VALID)


def test_concurrent_submissions_create_exactly_one_record(container, attendance):
    barrier = threading.Barrier(2)
    outcomes: list[object] = []

    def submit():
        barrier.wait()
        try:
            outcomes.append(container.attendance_service.submit(VALID))
        except AlreadyMarkedError as e:
            outcomes.append(e)

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(outcomes) == 2
    assert sum(isinstance(o, AlreadyMarkedError) for o in outcomes) == 1
    assert len(attendance.records) == 1


def test_other_student_can_still_mark_same_class(container, students, attendance):
    students._by_roll["21CS002"] = replace(students._by_roll["21CS001"], roll_number="21CS002")

    container.attendance_service.submit(VALID)
    container.attendance_service.submit(replace(VALID, roll_number="21CS002"))

    assert len(attendance.records) == 2


def test_window_uses_todays_date_for_start_time(container, classes, attendance, class_factory):
    # A class dated yesterday still opens at its start time today.
    classes.classes.append(
        class_factory("Compilers", time(9, 0), time(9, 50), class_code="CD-OLD", class_date=date(2026, 10, 17))
    )

    container.attendance_service.submit(replace(VALID, class_code="CD-OLD"))

    assert attendance.records[0].attendance_date == date(2026, 10, 18)


@pytest.mark.parametrize(
    "raw, expected",
    [(" ABC123 ", "abc123"), ("abc123", "abc123"), ("", None), ("   ", None), (None, None)],
)
def test_normalize_beacon_id(raw, expected):
    assert normalize_beacon_id(raw) == expected


def test_location_radius_is_inclusive(container, locations, attendance):
    locations.locations[0] = ClassLocation(class_name="CSE-A", latitude=17.3850, longitude=78.4867, radius=0, beacon_id="ABC123")

    container.attendance_service.submit(VALID)

    assert len(attendance.records) == 1
