from datetime import date
from decimal import Decimal

import pytest

from ella_rises.exceptions import MissingFieldsError, UnknownFieldsError, UnknownTableError
from ella_rises.extensions import db
from ella_rises.models import Donation, Event, Milestone, SurveyResult, User
from ella_rises.services.entity_registry import REGISTRY, Entity, clean_input, resolve


class TestRegistry:
    def test_resolves_tables_and_aliases(self):
        assert resolve("survey_results").primary_key == "survey_id"
        assert resolve("survey_results").list_route == "/surveys"
        assert resolve("participants").entity == Entity.USERS

    def test_unknown_table(self):
        with pytest.raises(UnknownTableError):
            resolve("pg_catalog")

    def test_clean_input_rejects_ui_only_fields(self, app):
        with pytest.raises(UnknownFieldsError) as excinfo:
            clean_input(
                REGISTRY[Entity.EVENT_REGISTRATIONS],
                {"user_id": "1", "event_id": "2", "event_name": "STEM"},
            )
        assert excinfo.value.fields == ["event_name"]

    def test_clean_input_requires_fields(self, app):
        with pytest.raises(MissingFieldsError) as excinfo:
            clean_input(REGISTRY[Entity.MILESTONES], {"user_id": "1", "milestone_title": " "})
        assert excinfo.value.fields == ["milestone_title"]

    def test_clean_input_coerces_types(self, app):
        attrs = clean_input(
            REGISTRY[Entity.EVENTS],
            {
                "event_name": "Gala",
                "event_date": "2025-05-01",
                "event_start_time": "18:30",
                "event_capacity": "40",
                "event_type_id": "",
            },
        )
        assert attrs["event_date"] == date(2025, 5, 1)
        assert attrs["event_start_time"].hour == 18
        assert attrs["event_capacity"] == 40
        assert attrs["event_type_id"] is None

    def test_clean_input_reports_bad_values(self, app):
        with pytest.raises(ValueError, match="event_date"):
            clean_input(REGISTRY[Entity.EVENTS], {"event_name": "Gala", "event_date": "soon"})

    def test_clean_input_rejects_unknown_choices(self, app):
        spec = REGISTRY[Entity.SURVEY_RESULTS]
        with pytest.raises(ValueError, match="survey_nps_bucket"):
            clean_input(spec, {"event_registration_id": "1", "survey_nps_bucket": "Fan"})
        attrs = clean_input(spec, {"event_registration_id": "1", "survey_nps_bucket": "Promoter"})
        assert attrs["survey_nps_bucket"] == "Promoter"

    def test_password_is_hashed_and_blank_password_dropped(self, app):
        spec = REGISTRY[Entity.USERS]
        attrs = clean_input(spec, {"participant_password": "pw"}, partial=True)
        assert attrs["participant_password"] != "pw"
        assert clean_input(spec, {"participant_password": ""}, partial=True) == {}


class TestAddRoutes:
    def test_add_form_prefills_user(self, admin_client, sample_data):
        response = admin_client.get(f"/add/milestones/{sample_data['jane']}")
        assert response.status_code == 200
        assert f'value="{sample_data["jane"]}"'.encode() in response.data

    def test_add_milestone_redirects_to_list(self, admin_client, sample_data):
        response = admin_client.post(
            "/add/milestones",
            data={
                "user_id": sample_data["sam"],
                "milestone_title": "Robotics Team",
                "milestone_category": "STEM",
            },
        )
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/milestones")
        assert Milestone.query.filter_by(milestone_title="Robotics Team").count() == 1

        page = admin_client.get("/milestones")
        assert b"Added Successfully!" in page.data

    def test_add_registration_redirects_to_registration_list(self, admin_client, sample_data):
        response = admin_client.post(
            "/add/event_registrations",
            data={"user_id": sample_data["sam"], "event_id": sample_data["leadership"]},
        )
        assert response.headers["Location"].endswith("/event_registrations")

    def test_unknown_field_is_flashed_and_not_saved(self, admin_client, sample_data):
        response = admin_client.post(
            "/add/events",
            data={"event_name": "Gala", "event_date": "2025-05-01", "bogus": "x"},
        )
        assert response.headers["Location"].endswith("/events")
        assert Event.query.filter_by(event_name="Gala").count() == 0
        page = admin_client.get("/events")
        assert b"Unknown fields: bogus" in page.data

    def test_unknown_table_is_404(self, admin_client):
        assert admin_client.post("/add/nope", data={}).status_code == 404

    def test_second_survey_for_registration_updates_in_place(self, admin_client, sample_data):
        registration_id = sample_data["jane_stem"]
        for score in ("2", "4"):
            response = admin_client.post(
                "/add/survey_results",
                data={
                    "event_registration_id": registration_id,
                    "survey_satisfaction_score": score,
                    "survey_nps_bucket": "Detractor",
                },
            )
            assert response.headers["Location"].endswith("/surveys")

        surveys = SurveyResult.query.filter_by(event_registration_id=registration_id).all()
        assert len(surveys) == 1
        assert surveys[0].survey_id == sample_data["promoter"]
        assert surveys[0].survey_satisfaction_score == 4
        assert surveys[0].survey_nps_bucket == "Detractor"

    def test_survey_for_new_registration_is_inserted(self, admin_client, sample_data):
        admin_client.post(
            "/add/survey_results",
            data={"event_registration_id": sample_data["maria_stem"], "survey_overall_score": "5"},
        )
        survey = SurveyResult.query.filter_by(
            event_registration_id=sample_data["maria_stem"]
        ).one()
        assert survey.survey_overall_score == Decimal("5")
        assert survey.submission_date is not None


class TestEditRoutes:
    def test_edit_survey_form_includes_event(self, admin_client, sample_data):
        response = admin_client.get(f"/edit/survey_results/{sample_data['promoter']}")
        assert response.status_code == 200
        assert b"STEM Workshop" in response.data

    def test_missing_record_is_404(self, admin_client, sample_data):
        assert admin_client.get("/edit/events/9999").status_code == 404
        assert admin_client.post("/edit/events/9999", data={}).status_code == 404

    def test_update_event(self, admin_client, sample_data):
        response = admin_client.post(
            f"/edit/events/{sample_data['stem']}",
            data={"event_name": "STEM Lab", "event_capacity": "30"},
        )
        assert response.headers["Location"].endswith("/events")
        event = db.session.get(Event, sample_data["stem"])
        assert event.event_name == "STEM Lab"
        assert event.event_capacity == 30
        assert event.event_location == "Provo"

    def test_blank_required_field_is_rejected(self, admin_client, sample_data):
        admin_client.post(f"/edit/events/{sample_data['stem']}", data={"event_name": ""})
        assert db.session.get(Event, sample_data["stem"]).event_name == "STEM Workshop"


class TestDeleteRoute:
    def test_delete_returns_json(self, admin_client, sample_data):
        donation = Donation.query.filter_by(user_id=sample_data["maria"]).one()
        response = admin_client.post(f"/delete/donations/{donation.donation_id}")
        assert response.status_code == 200
        assert response.get_json() == {"success": True}
        assert Donation.query.filter_by(user_id=sample_data["maria"]).count() == 0

    def test_delete_missing_record(self, admin_client, sample_data):
        response = admin_client.post("/delete/donations/9999")
        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestAccess:
    def test_dashboard_requires_admin(self, jane_client):
        response = jane_client.get("/users")
        assert response.status_code == 403
        assert b"administrators only" in response.data

    def test_anonymous_is_sent_to_login(self, client):
        response = client.get("/events")
        assert response.status_code == 302
        assert "/login" in response.headers["Location"]

    @pytest.mark.parametrize(
        "path",
        ["/users", "/participants", "/events", "/surveys", "/milestones", "/donations", "/event_registrations"],
    )
    def test_list_pages_render(self, admin_client, path):
        assert admin_client.get(path).status_code == 200

    def test_list_page_search(self, admin_client):
        response = admin_client.get("/users?searchValue=jane+smith")
        assert b"Smith" in response.data
        assert b"Jones" not in response.data

    def test_list_page_message_from_query_string(self, admin_client):
        response = admin_client.get("/donations?message=Deleted&messageType=warning")
        assert b"alert-warning" in response.data


def test_participant_cannot_reach_add_form(jane_client):
    assert jane_client.get("/add/users").status_code == 403


def test_users_list_excludes_admin(admin_client):
    response = admin_client.get("/users")
    assert b"admin@example.com" not in response.data
    assert User.query.count() == 5
