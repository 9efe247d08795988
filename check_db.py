from ella_rises import create_app
from ella_rises.extensions import db
from sqlalchemy import text

app = create_app()
with app.app_context():
    try:
        with db.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        print("Connected to the database successfully.")
    except Exception as e:
        print(f"Failed to connect to the database: {e}")
