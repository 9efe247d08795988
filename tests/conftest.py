from datetime import date, time
from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from ella_rises import create_app
from ella_rises.extensions import db
from ella_rises.models import (
    Donation,
    Event,
    EventRegistration,
    EventType,
    Milestone,
    SurveyResult,
    User,
)

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "SECRET_KEY": "test-secret",
            "RATELIMIT_ENABLED": False,
            "APP_TIMEZONE": "UTC",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(first, last, email, role="participant", **attrs):
    user = User(
        participant_first_name=first,
        participant_last_name=last,
        participant_email=email,
        participant_password=generate_password_hash(PASSWORD),
        participant_role=role,
        **attrs,
    )
    db.session.add(user)
    return user


@pytest.fixture
def sample_data(app):
    admin = make_user("Ada", "Admin", "admin@example.com", role="admin")
    jane = make_user(
        "Jane",
        "Smith",
        "jane@example.com",
        participant_city="Provo",
        participant_school_or_employer="BYU",
        participant_field_of_interest="Engineering",
    )
    janet = make_user(
        "Janet",
        "Jones",
        "janet@example.com",
        participant_city="Orem",
        participant_school_or_employer="UVU",
        participant_field_of_interest="Art",
    )
    maria = make_user(
        "Maria",
        "Janeway",
        "maria@example.com",
        participant_city="Provo",
        participant_school_or_employer="BYU",
        participant_field_of_interest="Art",
    )
    sam = make_user("Sam", "Carter", "sam@example.com", participant_city="Lehi")

    workshop = EventType(event_type_name="Workshop")
    summit = EventType(event_type_name="Summit")
    db.session.add_all([workshop, summit])
    db.session.flush()

    stem = Event(
        event_name="STEM Workshop",
        event_date=date(2025, 3, 15),
        event_start_time=time(14, 30),
        event_end_time=time(16, 0),
        event_location="Provo",
        event_capacity=2,
        event_type_id=workshop.event_type_id,
    )
    leadership = Event(
        event_name="Leadership Summit",
        event_date=date(2025, 4, 20),
        event_start_time=time(9, 0),
        event_location="Orem",
        event_capacity=50,
        event_type_id=summit.event_type_id,
    )
    art_night = Event(
        event_name="Art Night",
        event_date=date(2024, 11, 5),
        event_start_time=time(18, 0),
        event_location="Provo",
        event_capacity=20,
        registration_deadline_date=date(2024, 11, 1),
    )
    db.session.add_all([stem, leadership, art_night])
    db.session.flush()

    jane_stem = EventRegistration(
        user=jane, event=stem, registration_status="registered"
    )
    maria_stem = EventRegistration(
        user=maria,
        event=stem,
        registration_status="attended",
        registration_attended_flag=True,
    )
    janet_summit = EventRegistration(
        user=janet, event=leadership, registration_status="cancelled"
    )
    jane_art = EventRegistration(
        user=jane,
        event=art_night,
        registration_status="attended",
        registration_attended_flag=True,
    )
    db.session.add_all([jane_stem, maria_stem, janet_summit, jane_art])
    db.session.flush()

    promoter = SurveyResult(
        event_registration_id=jane_stem.event_registration_id,
        survey_satisfaction_score=5,
        survey_usefulness_score=5,
        survey_instructor_score=4,
        survey_recommendation_score=5,
        survey_overall_score=Decimal("4.75"),
        survey_nps_bucket="Promoter",
        survey_comments="Loved it",
        submission_date=date(2025, 3, 16),
    )
    passive = SurveyResult(
        event_registration_id=jane_art.event_registration_id,
        survey_satisfaction_score=3,
        survey_usefulness_score=3,
        survey_instructor_score=3,
        survey_recommendation_score=3,
        survey_overall_score=Decimal("3"),
        survey_nps_bucket="Passive",
        submission_date=date(2024, 11, 6),
    )
    db.session.add_all([promoter, passive])

    db.session.add_all(
        [
            Donation(user=jane, donation_date=date(2025, 3, 15), donation_amount=Decimal("50.00")),
            Donation(user=jane, donation_date=date(2024, 12, 1), donation_amount=Decimal("25.00")),
            Donation(user=maria, donation_date=date(2025, 1, 10), donation_amount=Decimal("0")),
            Milestone(
                user=jane,
                milestone_title="Graduated High School",
                milestone_date=date(2024, 5, 1),
                milestone_category="Education",
            ),
            Milestone(
                user=maria,
                milestone_title="First Internship",
                milestone_date=date(2025, 2, 1),
                milestone_category="Career",
            ),
            Milestone(
                user=janet, milestone_title="Science Fair", milestone_category="Education"
            ),
        ]
    )
    db.session.commit()

    return {
        "admin": admin.user_id,
        "jane": jane.user_id,
        "janet": janet.user_id,
        "maria": maria.user_id,
        "sam": sam.user_id,
        "stem": stem.event_id,
        "leadership": leadership.event_id,
        "art_night": art_night.event_id,
        "jane_stem": jane_stem.event_registration_id,
        "maria_stem": maria_stem.event_registration_id,
        "janet_summit": janet_summit.event_registration_id,
        "jane_art": jane_art.event_registration_id,
        "promoter": promoter.survey_id,
        "passive": passive.survey_id,
    }


def log_in_as(client, user_id, role="participant"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


@pytest.fixture
def login(client, sample_data):
    """Log the test client in as one of the sample users, by key."""

    def _login(name, role="participant"):
        log_in_as(client, sample_data[name], role=role)
        return client

    return _login


@pytest.fixture
def admin_client(client, sample_data):
    log_in_as(client, sample_data["admin"], role="admin")
    return client


@pytest.fixture
def jane_client(client, sample_data):
    log_in_as(client, sample_data["jane"])
    return client
