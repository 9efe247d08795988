from ella_rises.extensions import db


class Donation(db.Model):
    __tablename__ = "donations"

    donation_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    donation_date = db.Column(db.Date, nullable=True)
    donation_amount = db.Column(db.Numeric(10, 2), nullable=True)

    user = db.relationship(
        "User",
        backref=db.backref(
            "donations", lazy=True, cascade="all, delete-orphan", passive_deletes=True
        ),
    )
