from datetime import date, datetime

import pytz
from flask import current_app

DEFAULT_TIMEZONE = "America/Denver"


def app_timezone():
    name = current_app.config.get("APP_TIMEZONE", DEFAULT_TIMEZONE)
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        current_app.logger.warning(f"Unknown APP_TIMEZONE {name}, using UTC")
        return pytz.UTC


def now_local() -> datetime:
    """Current wall-clock time in the application time zone (naive)."""
    return datetime.now(pytz.UTC).astimezone(app_timezone()).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()
