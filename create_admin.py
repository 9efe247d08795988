import os
from ella_rises import create_app
from ella_rises.models import User
from ella_rises.extensions import db
from werkzeug.security import generate_password_hash
from ella_rises.models.enums import UserRole


def create_admin_user(update=False):
    email = os.getenv("ADMIN_EMAIL", "admin@ellarises.org")
    password = os.getenv("ADMIN_PASSWORD", "admin123")
    app = create_app()
    with app.app_context():
        # Check if admin already exists
        admin = User.query.filter_by(participant_email=email).first()
        if not admin:
            admin = User(
                participant_email=email,
                participant_password=generate_password_hash(password),
                participant_role=UserRole.ADMIN.value,
                participant_first_name="Admin",
                participant_last_name="User",
            )
            db.session.add(admin)
            db.session.commit()
            print("Admin user created successfully!")
        elif update:
            admin.participant_password = generate_password_hash(password)
            admin.participant_role = UserRole.ADMIN.value
            db.session.commit()
            print("Admin user updated successfully!")
        else:
            print("Admin user already exists!")


if __name__ == '__main__':
    create_admin_user(update=True)
