from datetime import date, datetime

from fieldops_scheduler.services.compliance import generate_compliance_tasks, set_out_reminders
from fieldops_scheduler.services.domain import Building, StopKind, Urgency
from fieldops_scheduler.services.holidays import (
    get_sanitation_holidays,
    is_sanitation_holiday,
    iter_sanitation_holidays,
)
from fieldops_scheduler.services.recurrence import TimeOfDay
from fieldops_scheduler.services.weather_profiles import TaskCategory

from .factories import make_window

PERRY = Building("10", "131 Perry Street")
TUESDAY = date(2026, 10, 20)
WEDNESDAY = date(2026, 10, 21)


def test_collection_day_gets_set_out_and_retrieval() -> None:
    tasks = generate_compliance_tasks(PERRY, TUESDAY, [make_window()])

    set_outs = [task for task in tasks if task.kind is StopKind.SET_OUT]
    retrievals = [task for task in tasks if task.kind is StopKind.RETRIEVAL]
    assert len(set_outs) == 1
    assert len(retrievals) == 1
    assert set_outs[0].arrival == datetime(2026, 10, 19, 20, 0)
    assert retrievals[0].arrival == datetime(2026, 10, 20, 8, 0)
    assert all(task.locked for task in tasks)


def test_compliance_operations_are_critical() -> None:
    tasks = generate_compliance_tasks(PERRY, TUESDAY, [make_window(set_out_minutes=20)])

    operation = tasks[0].operations[0]
    assert operation.category is TaskCategory.COMPLIANCE
    assert operation.urgency is Urgency.CRITICAL
    assert operation.requires_photo
    assert tasks[0].duration_minutes == 20


def test_non_collection_day_emits_nothing() -> None:
    assert generate_compliance_tasks(PERRY, WEDNESDAY, [make_window()]) == []


def test_retrieval_is_optional() -> None:
    tasks = generate_compliance_tasks(PERRY, TUESDAY, [make_window(requires_retrieval=False)])

    assert [task.kind for task in tasks] == [StopKind.SET_OUT]


def test_other_buildings_and_missing_windows_are_ignored() -> None:
    other = make_window(building_id="6", building_name="68 Perry Street")

    assert generate_compliance_tasks(PERRY, TUESDAY, [other]) == []
    assert generate_compliance_tasks(PERRY, TUESDAY, []) == []


def test_custom_times_are_respected() -> None:
    window = make_window(set_out_time=TimeOfDay(19, 30), retrieval_time=TimeOfDay(10, 15))

    tasks = generate_compliance_tasks(PERRY, TUESDAY, [window])

    assert [task.arrival for task in tasks] == [
        datetime(2026, 10, 19, 19, 30),
        datetime(2026, 10, 20, 10, 15),
    ]


def test_holidays_skip_collection() -> None:
    thanksgiving = date(2026, 11, 26)
    window = make_window(days="thu")

    assert generate_compliance_tasks(PERRY, thanksgiving, [window], holidays=[thanksgiving]) == []
    assert len(generate_compliance_tasks(PERRY, thanksgiving, [window])) == 2


def test_stop_ids_are_stable() -> None:
    first = generate_compliance_tasks(PERRY, TUESDAY, [make_window()])
    second = generate_compliance_tasks(PERRY, TUESDAY, [make_window()])

    assert [task.id for task in first] == [task.id for task in second]
    assert first[0].id == "compliance:10:2026-10-20:set-out"


def test_set_out_reminders_look_at_tomorrow() -> None:
    windows = [
        make_window(),
        make_window(building_id="6", building_name="68 Perry Street", days="mon,wed,fri"),
        make_window(building_id="3", building_name="135 West 17th", days="tue", set_out_time=TimeOfDay(19, 0)),
    ]

    reminders = set_out_reminders(windows, date(2026, 10, 19))

    assert [window.building_id for window in reminders] == ["3", "10"]


def test_sanitation_holidays_2026() -> None:
    holidays = {holiday.code: holiday.date for holiday in get_sanitation_holidays(2026)}

    assert holidays["memorial_day"] == date(2026, 5, 25)
    assert holidays["labor_day"] == date(2026, 9, 7)
    assert holidays["thanksgiving_day"] == date(2026, 11, 26)
    assert is_sanitation_holiday(date(2026, 12, 25))
    assert not is_sanitation_holiday(date(2026, 12, 24))
    assert len(list(iter_sanitation_holidays(2025, 2027))) == 18
