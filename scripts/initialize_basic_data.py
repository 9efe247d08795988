import sys
import os

sys.path.append(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)  # relative imports

from ella_rises import create_app
from ella_rises.extensions import db
from ella_rises.models import EventType

EVENT_TYPES = [
    ("Workshop", "Hands-on skill building session"),
    ("Mentoring", "Small-group mentoring with volunteers"),
    ("Summit", "Annual leadership summit"),
    ("Social", "Community and family gatherings"),
]


def initialize_basic_data():
    """Seed lookup tables such as event types"""
    app = create_app()
    with app.app_context():
        print("Initializing event types...")
        try:
            for name, description in EVENT_TYPES:
                if not EventType.query.filter_by(event_type_name=name).first():
                    db.session.add(
                        EventType(event_type_name=name, event_type_description=description)
                    )
            db.session.commit()
            print("Event types initialized successfully!")
        except Exception as e:
            db.session.rollback()
            print(f"Error initializing event types: {e}")

if __name__ == "__main__":
    initialize_basic_data()
