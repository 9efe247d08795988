from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate(compare_type=True, render_as_batch=True)
limiter = Limiter(
    get_remote_address,
    default_limits=["150 per minute", "10000 per hour"],
    strategy="fixed-window",
)
