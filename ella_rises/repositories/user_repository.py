from sqlalchemy import func

from ella_rises.extensions import db
from ella_rises.models import Donation, User


class UserRepository:
    @staticmethod
    def sign_up(user):
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def find_by_email(email):
        return User.query.filter(
            func.lower(User.participant_email) == email.strip().lower()
        ).first()

    @staticmethod
    def find_by_id(user_id: int):
        return User.query.filter_by(user_id=user_id).first()

    @staticmethod
    def total_donations(user_id: int):
        return (
            db.session.query(func.sum(Donation.donation_amount))
            .filter(Donation.user_id == user_id)
            .scalar()
        )
