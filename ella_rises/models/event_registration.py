from ella_rises.extensions import db
from .enums import RegistrationStatus


class EventRegistration(db.Model):
    __tablename__ = "event_registrations"

    event_registration_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    event_id = db.Column(
        db.Integer, db.ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False
    )
    registration_status = db.Column(
        db.String(20), nullable=False, default=RegistrationStatus.REGISTERED.value
    )
    registration_attended_flag = db.Column(db.Boolean, nullable=False, default=False)
    registration_created_at_date = db.Column(db.Date, nullable=True)
    registration_created_at_time = db.Column(db.Time, nullable=True)
    registration_check_in_date = db.Column(db.Date, nullable=True)
    registration_check_in_time = db.Column(db.Time, nullable=True)

    # Relationships
    event = db.relationship(
        "Event",
        backref=db.backref(
            "registrations", lazy=True, cascade="all, delete-orphan", passive_deletes=True
        ),
    )
    user = db.relationship(
        "User",
        backref=db.backref(
            "event_registrations", lazy=True, cascade="all, delete-orphan", passive_deletes=True
        ),
    )

    def __repr__(self):
        return (
            f"EventRegistration("
            f"id={self.event_registration_id}, "
            f"event_id={self.event_id}, "
            f"user_id={self.user_id}, "
            f"status={self.registration_status}, "
            f"attended={self.registration_attended_flag}"
            f")"
        )
