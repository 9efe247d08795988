from ella_rises.extensions import db


class EventType(db.Model):
    __tablename__ = "event_types"

    event_type_id = db.Column(db.Integer, primary_key=True)
    event_type_name = db.Column(db.String(100), unique=True, nullable=False)
    event_type_description = db.Column(db.Text, nullable=True)
