from dataclasses import asdict, dataclass, fields
from typing import Optional

from flask import g, session

from ella_rises.models.enums import UserRole

SUPPORTED_LANGUAGES = ("en", "es")


@dataclass
class SessionContext:
    """Typed view of the cookie session for the current request."""

    user_id: Optional[int] = None
    role: Optional[str] = None
    first_name: Optional[str] = None
    flash_message: Optional[str] = None
    flash_type: Optional[str] = None
    language: str = "en"

    @classmethod
    def load(cls):
        values = {f.name: session[f.name] for f in fields(cls) if f.name in session}
        return cls(**values)

    def save(self):
        for key, value in asdict(self).items():
            if value is None:
                session.pop(key, None)
            else:
                session[key] = value

    @property
    def is_logged_in(self):
        return self.user_id is not None

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value

    def log_in(self, user):
        self.user_id = user.user_id
        self.role = user.participant_role
        self.first_name = user.participant_first_name

    def log_out(self):
        language = self.language
        session.clear()
        self.user_id = None
        self.role = None
        self.first_name = None
        self.flash_message = None
        self.flash_type = None
        self.language = language

    def flash(self, message, message_type="success"):
        self.flash_message = message
        self.flash_type = message_type

    def pop_flash(self):
        message = self.flash_message or ""
        message_type = self.flash_type or "success"
        self.flash_message = None
        self.flash_type = None
        return message, message_type


def load_session_context():
    g.session_context = SessionContext.load()


def get_session_context() -> SessionContext:
    if "session_context" not in g:
        load_session_context()
    return g.session_context


def persist_session_context(response):
    if "session_context" in g:
        g.session_context.save()
    return response
