from ella_rises.extensions import db


class Milestone(db.Model):
    __tablename__ = "milestones"

    milestone_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    milestone_title = db.Column(db.String(255), nullable=False)
    milestone_date = db.Column(db.Date, nullable=True)
    milestone_category = db.Column(db.String(100), nullable=True)

    user = db.relationship(
        "User",
        backref=db.backref(
            "milestones", lazy=True, cascade="all, delete-orphan", passive_deletes=True
        ),
    )
