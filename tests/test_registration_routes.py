"""Tests for the public registration form and referral lookup"""

import uuid

from tests.helpers import submission


class TestRegistrationForm:
    def test_form_plan_blocked_without_ministries(self, client, seeded_regions):
        response = client.get("/api/form")
        assert response.status_code == 200
        plan = response.json()
        assert plan["blocked"] is True
        assert plan["ministries"] == []

    def test_form_plan_with_fallback_regions(self, client, seeded_ministries):
        plan = client.get("/api/form").json()
        assert plan["blocked"] is False
        assert plan["using_fallback_regions"] is True
        assert [o["value"] for o in plan["regions"]][0] == "Central"
        assert plan["gender_choices"] == ["Male", "Female", "Prefer not to say"]

    def test_form_plan_includes_active_fields(
        self, client, seeded_ministries, form_field_service
    ):
        form_field_service.create_field(
            {"label": "Shirt size", "name": "shirt_size", "type": "select", "options": ["S", "M"]}
        )
        plan = client.get("/api/form").json()
        assert plan["fields"][0]["name"] == "shirt_size"
        assert plan["fields"][0]["control_kind"] == "select"

    def test_html_form_renders_dynamic_inputs(
        self, client, seeded_regions, seeded_ministries, form_field_service
    ):
        form_field_service.create_field(
            {"label": "Dietary needs", "name": "dietary_needs", "type": "textarea"}
        )
        response = client.get("/")
        assert response.status_code == 200
        assert 'name="extra.dietary_needs"' in response.text
        assert seeded_ministries[0].name in response.text

    def test_html_form_shows_blocked_notice(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "No ministries are available yet" in response.text
        assert "registration-form" not in response.text


class TestRegistrationSubmit:
    def test_submit_success(
        self, client, seeded_regions, seeded_ministries, form_field_service, registration_service
    ):
        form_field_service.create_field(
            {"label": "Shirt size", "name": "shirt_size", "type": "select", "options": ["S", "M"]}
        )
        data = submission(
            seeded_regions[0].id,
            seeded_ministries[0].id,
            **{"extra.shirt_size": "M", "town_city": "Kumasi"},
        )
        response = client.post("/", data=data)

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True

        registration = registration_service.get_registration_by_id(
            uuid.UUID(body["registration_id"])
        )
        assert registration.region_id == seeded_regions[0].id
        assert registration.extra_data == {"shirt_size": "M", "town_city": "Kumasi"}

    def test_submit_validation_errors(self, client, seeded_regions, seeded_ministries):
        data = submission(seeded_regions[0].id, seeded_ministries[0].id, attendee_name="")
        response = client.post("/", data=data)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors == [
            {
                "code": "missing_required_field",
                "field": "attendee_name",
                "message": "Full name is required",
            }
        ]

    def test_file_upload_in_dynamic_field_rejected(
        self, client, seeded_regions, seeded_ministries, form_field_service, registration_service
    ):
        form_field_service.create_field({"label": "Notes", "name": "notes", "type": "textarea"})
        response = client.post(
            "/",
            data=submission(seeded_regions[0].id, seeded_ministries[0].id),
            files={"extra.notes": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert [(e["field"], e["code"]) for e in errors] == [
            ("notes", "invalid_field_value")
        ]
        assert registration_service.list_registrations() == []

    def test_non_finite_number_rejected(
        self, client, seeded_regions, seeded_ministries, form_field_service
    ):
        form_field_service.create_field({"label": "Age", "name": "age", "type": "number"})
        data = submission(seeded_regions[0].id, seeded_ministries[0].id, **{"extra.age": "nan"})
        response = client.post("/", data=data)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "age"

    def test_submit_blocked_without_ministries(self, client, seeded_regions):
        response = client.post("/", data=submission(seeded_regions[0].id, uuid.uuid4()))
        assert response.status_code == 409
        assert response.json()["blocked"] is True

    def test_submit_after_setting_theme(self, client, seeded_regions, seeded_ministries):
        client.put("/preferences/theme", json={"theme": "dark"})
        response = client.post(
            "/", data=submission(seeded_regions[0].id, seeded_ministries[0].id)
        )
        assert response.status_code == 200, response.text

    def test_submit_with_fallback_region(self, client, seeded_ministries, registration_service):
        response = client.post("/", data=submission("Southern", seeded_ministries[0].id))
        assert response.status_code == 200, response.text

        referrals = registration_service.get_referrals("referrer@example.com")
        assert referrals[0].region_name == "Southern"


class TestReferrals:
    def test_referral_lookup(self, client, seeded_regions, seeded_ministries):
        for name in ["Ama", "Kofi"]:
            client.post(
                "/",
                data=submission(
                    seeded_regions[0].id, seeded_ministries[0].id, attendee_name=name
                ),
            )

        response = client.get("/api/referrals", params={"email": " referrer@EXAMPLE.com "})
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert sorted(r["attendee_name"] for r in body["referrals"]) == ["Ama", "Kofi"]
        assert "attendee_email" not in body["referrals"][0]

    def test_referral_lookup_requires_email(self, client):
        assert client.get("/api/referrals", params={"email": "  "}).status_code == 400
