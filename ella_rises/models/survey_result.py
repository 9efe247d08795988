from ella_rises.extensions import db


class SurveyResult(db.Model):
    __tablename__ = "survey_results"

    survey_id = db.Column(db.Integer, primary_key=True)
    event_registration_id = db.Column(
        db.Integer,
        db.ForeignKey("event_registrations.event_registration_id", ondelete="CASCADE"),
        nullable=False,
    )
    survey_satisfaction_score = db.Column(db.Integer, nullable=True)
    survey_usefulness_score = db.Column(db.Integer, nullable=True)
    survey_instructor_score = db.Column(db.Integer, nullable=True)
    survey_recommendation_score = db.Column(db.Integer, nullable=True)
    survey_overall_score = db.Column(db.Numeric(4, 2), nullable=True)
    survey_nps_bucket = db.Column(db.String(20), nullable=True)
    survey_comments = db.Column(db.Text, nullable=True)
    submission_date = db.Column(db.Date, nullable=True)
    submission_time = db.Column(db.Time, nullable=True)

    # One survey per registration
    __table_args__ = (
        db.UniqueConstraint("event_registration_id", name="uq_survey_registration"),
    )

    registration = db.relationship(
        "EventRegistration",
        backref=db.backref(
            "survey_results", lazy=True, cascade="all, delete-orphan", passive_deletes=True
        ),
    )
