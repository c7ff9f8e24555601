from datetime import date

from leave_sync.modules.leave_service import LeaveService
from omnihr.directory import EmployeeDirectory, is_excluded
from pydantic_models.config.directory_config import DirectoryConfig

from conftest import FakeResponse

EMPLOYEES = [
    {"id": 1, "full_name": "Alice Tan", "employee_id": "SM0001", "hired_date": "15/03/2026"},
    {"id": 2, "full_name": " omni support "},
    {"id": 3, "name": "Bob Lim", "hired_date": "not a date"},
    {"id": 4, "full_name": "People Culture"},
]

CALENDAR = {
    "time_off_request": [
        {
            "status": 3,
            "effective_date": "10/06/2026",
            "end_date": "12/06/2026",
            "effective_date_duration": 1,
            "end_date_duration": 2,
            "time_off": {"name": "Annual Leave"},
        },
        {"status": 1, "effective_date": "15/06/2026", "effective_date_duration": 1},
    ],
    "holiday": [{"date": "11/06/2026", "name": "Founders Day"}],
}


def directory_routes():
    return {
        "/employee/list/": FakeResponse(200, {"results": EMPLOYEES, "next": None}),
        "/onboarding/workflow-dashboard/": FakeResponse(
            200, {"results": [{"id": 3, "termination_date": "30/06/2026"}, {"id": 1, "termination_date": None}], "next": None}
        ),
        "/employee/2.0/users/1/job/": FakeResponse(200, {"department": {"name": "Engineering"}, "team": "Core"}),
        "/employee/2.0/users/3/job/": FakeResponse(500, {"detail": "boom"}),
    }


def test_is_excluded_is_case_insensitive_and_trimmed():
    assert is_excluded("  OMNI SUPPORT ", ["Omni Support"])
    assert not is_excluded("Omni Support Team", ["Omni Support"])


def test_fetch_employees_merges_and_filters(make_client):
    directory = EmployeeDirectory(make_client(directory_routes()), DirectoryConfig())
    employees = directory.fetch_employees()

    assert [(e.user_id, e.full_name) for e in employees] == [(1, "Alice Tan"), (3, "Bob Lim")]
    alice, bob = employees
    assert alice.employee_id == "SM0001"
    assert alice.hired_date == date(2026, 3, 15)
    assert alice.department == "Engineering"
    assert alice.team == "Core"
    assert alice.termination_date is None
    assert bob.hired_date is None
    assert bob.termination_date == date(2026, 6, 30)
    # failed job lookup leaves the fields empty
    assert bob.department is None


def test_fetch_employees_without_lookups(make_client):
    client = make_client(directory_routes())
    EmployeeDirectory(client, DirectoryConfig(excluded_employees=[])).fetch_employees(with_jobs=False, with_terminations=False)
    paths = {call["path"] for call in client.session.calls}
    assert paths == {"/auth/token/", "/employee/list/"}


def leave_routes():
    return {
        "/employee/list/": FakeResponse(200, EMPLOYEES),
        "/employee/2.0/users/1/base-data/": FakeResponse(200, {"data": {"employee_id": "SM0001"}}),
        "/employee/1.1/users/1/time-off-types/": FakeResponse(
            200,
            [
                {
                    "time_off": {"name": "Annual Leave"},
                    "time_off_balance": {"entitlement_earned": "14", "display_taken": 2, "days": 12},
                }
            ],
        ),
        "/employee/1.1/1/time-off-calendar/": FakeResponse(200, CALENDAR),
    }


def test_get_all_leave_data(make_client):
    client = make_client(leave_routes())
    service = LeaveService(client, EmployeeDirectory(client, DirectoryConfig()))
    progress = []
    leave_data = service.get_all_leave_data(6, 2026, concurrency=1, on_progress=lambda *args: progress.append(args))

    assert [h.day for h in service.holidays] == [11]
    assert [record.employee_name for record in leave_data] == ["Alice Tan", "Bob Lim"]

    alice, bob = leave_data
    assert alice.error is None
    assert alice.employee_id == "SM0001"
    assert [(d.date, d.is_half_day) for d in alice.leave_requests] == [(10, False), (12, True)]
    [balance] = alice.leave_balances
    assert (balance.leave_type, balance.entitlement, balance.taken, balance.remaining) == ("Annual Leave", 14.0, 2.0, 12.0)

    # Bob's endpoints are missing (404): recorded, not raised
    assert bob.error
    assert bob.leave_requests == []
    assert progress == [(1, 2, "Alice Tan"), (2, 2, "Bob Lim")]


def test_calendar_is_requested_with_month_bounds(make_client):
    client = make_client(leave_routes())
    service = LeaveService(client, EmployeeDirectory(client))
    service.get_user_time_off_calendar(1, date(2026, 6, 1), date(2026, 6, 30))
    call = client.session.calls[-1]
    assert call["path"] == "/employee/1.1/1/time-off-calendar/"
    assert call["params"] == {"start_date": "01/06/2026", "end_date": "30/06/2026"}
