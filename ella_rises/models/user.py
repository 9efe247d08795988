from ella_rises.extensions import db
from .enums import UserRole


class User(db.Model):
    __tablename__ = "users"

    user_id = db.Column(db.Integer, primary_key=True)
    participant_email = db.Column(db.String(255), unique=True, nullable=False)
    participant_password = db.Column(db.String(255), nullable=True)
    participant_first_name = db.Column(db.String(100), nullable=False)
    participant_last_name = db.Column(db.String(100), nullable=False)
    participant_dob = db.Column(db.Date, nullable=True)
    participant_role = db.Column(
        db.String(20), nullable=False, default=UserRole.PARTICIPANT.value
    )
    participant_phone = db.Column(db.String(30), nullable=True)
    participant_city = db.Column(db.String(100), nullable=True)
    participant_state = db.Column(db.String(50), nullable=True)
    participant_zip = db.Column(db.String(20), nullable=True)
    participant_school_or_employer = db.Column(db.String(255), nullable=True)
    participant_field_of_interest = db.Column(db.String(100), nullable=True)

    @property
    def full_name(self):
        return f"{self.participant_first_name} {self.participant_last_name}"

    @property
    def is_admin(self):
        return self.participant_role == UserRole.ADMIN.value

    def __repr__(self):
        return (
            f"User("
            f"user_id={self.user_id}, "
            f"first_name='{self.participant_first_name}', "
            f"last_name='{self.participant_last_name}', "
            f"role={self.participant_role}"
            f")"
        )
