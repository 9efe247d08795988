from ella_rises.extensions import db


class Event(db.Model):
    __tablename__ = "events"

    event_id = db.Column(db.Integer, primary_key=True)
    event_type_id = db.Column(
        db.Integer,
        db.ForeignKey("event_types.event_type_id", ondelete="SET NULL"),
        nullable=True,
    )
    event_name = db.Column(db.String(255), nullable=False)
    event_date = db.Column(db.Date, nullable=False)
    event_start_time = db.Column(db.Time, nullable=True)
    event_end_time = db.Column(db.Time, nullable=True)
    event_location = db.Column(db.String(255), nullable=True)
    event_capacity = db.Column(db.Integer, nullable=True)
    registration_deadline_date = db.Column(db.Date, nullable=True)
    registration_deadline_time = db.Column(db.Time, nullable=True)

    event_type = db.relationship("EventType", backref=db.backref("events", lazy=True))
