"""Small helpers shared by the route tests"""

from fastapi.testclient import TestClient

VALID_SUBMISSION = {
    "referrer_email": "Referrer@Example.com",
    "attendee_name": "Grace Mensah",
    "attendee_email": "grace@example.com",
    "attendee_phone": "555-0100",
    "gender": "Female",
    "age_group_ministry": "Adult Ministry",
}


def csrf_headers(client: TestClient) -> dict:
    """Header echoing the CSRF cookie, needed once a session cookie exists"""
    return {"X-CSRFToken": client.cookies.get("csrftoken", "")}


def submission(region_id, ministry_id, **overrides) -> dict:
    data = dict(VALID_SUBMISSION)
    data["region_id"] = str(region_id)
    data["ministry_id"] = str(ministry_id)
    data.update(overrides)
    return data
