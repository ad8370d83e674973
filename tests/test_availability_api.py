"""HTTP tests for /api/v1/availability"""
import datetime
import logging

from app.utils.my_logging import CorrelationIdFilter

from conftest import MONDAY, at


def params(company, service, **extra):
    values = {"company_id": company.id, "service_id": service.id, "date": MONDAY.isoformat()}
    values.update(extra)
    return values


def test_get_availability(client, salon):
    company, service, ana = salon

    response = client.get("/api/v1/availability", params=params(company, service))

    assert response.status_code == 200
    body = response.json()
    assert "message" not in body
    assert body["slots"][0] == {"time": "09:00", "employee_id": ana.id, "employee_name": "Ana"}
    assert body["slots"][-1]["time"] == "16:00"
    assert body["availability"] == [{
        "employee_id": ana.id,
        "employee_name": "Ana",
        "slots": [slot["time"] for slot in body["slots"]],
    }]


def test_post_availability_matches_get(client, salon):
    company, service, _ = salon

    got = client.get("/api/v1/availability", params=params(company, service))
    posted = client.post("/api/v1/availability", json=params(company, service))

    assert posted.status_code == 200
    assert posted.json() == got.json()


def test_blank_employee_means_any(client, salon):
    company, service, _ = salon

    response = client.get("/api/v1/availability", params=params(company, service, employee_id=""))

    assert response.status_code == 200
    assert response.json()["slots"]


def test_short_circuit_has_message(client, salon):
    company, service, _ = salon
    sunday = MONDAY - datetime.timedelta(days=1)

    response = client.get("/api/v1/availability", params=params(company, service, date=sunday.isoformat()))

    assert response.status_code == 200
    assert response.json() == {"slots": [], "availability": [], "message": "Business is closed on this day"}


def test_missing_parameter_is_400(client, salon):
    company, _, _ = salon

    response = client.get("/api/v1/availability", params={"company_id": company.id, "date": MONDAY.isoformat()})

    assert response.status_code == 400
    assert "service_id" in response.json()["error"]


def test_bad_date_is_400(client, salon):
    company, service, _ = salon

    response = client.get("/api/v1/availability", params=params(company, service, date="02/06/2025"))

    assert response.status_code == 400
    assert "error" in response.json()


def test_unknown_service_is_404(client, salon):
    company, _, _ = salon

    response = client.post(
        "/api/v1/availability",
        json={"company_id": company.id, "service_id": "nope", "date": MONDAY.isoformat()},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Service not found"}


def test_malformed_store_row_is_502(client, factory, salon):
    company, service, ana = salon
    factory.booking(company, service, ana, booking_time="late")

    response = client.get("/api/v1/availability", params=params(company, service))

    assert response.status_code == 502
    assert "error" in response.json()


def test_clock_drives_advance_notice(client, clock, salon):
    company, service, _ = salon
    clock.moment = at(MONDAY, 14, 0)

    response = client.get("/api/v1/availability", params=params(company, service))

    assert [slot["time"] for slot in response.json()["slots"]] == ["15:00", "15:30", "16:00"]


def test_available_dates(client, factory, salon):
    company, service, ana = salon
    # Open and staffed on Monday only; also open next Monday but fully blocked
    next_monday = MONDAY + datetime.timedelta(days=7)
    factory.block(company, day=next_monday)

    response = client.get(
        "/api/v1/availability/dates",
        params={
            "company_id": company.id,
            "service_id": service.id,
            "start_date": MONDAY.isoformat(),
            "days": 14,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"dates": [MONDAY.isoformat()]}


def test_available_dates_too_many_days(client, salon):
    company, service, _ = salon

    response = client.get(
        "/api/v1/availability/dates",
        params={"company_id": company.id, "service_id": service.id, "days": 1000},
    )

    assert response.status_code == 400


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"

    detailed = client.get("/health/detailed").json()
    assert detailed["database"] == "healthy"
    assert detailed["overall"] == "healthy"


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_worker_thread_logs_carry_correlation_id(client, factory, salon, caplog):
    company, service, ana = salon
    # A start time without an end is ignored with a warning from the loader
    factory.block(company, employee=ana, start_time="10:00")
    caplog.handler.addFilter(CorrelationIdFilter())

    with caplog.at_level(logging.INFO):
        response = client.get(
            "/api/v1/availability",
            params=params(company, service),
            headers={"X-Correlation-ID": "req-42"},
        )

    assert response.status_code == 200
    loader_records = [r for r in caplog.records if r.name == "app.services.availability.constraint_loader"]
    assert loader_records
    assert {r.correlation_id for r in loader_records} == {"req-42"}
