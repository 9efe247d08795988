from enum import Enum


class UserRole(Enum):
    PARTICIPANT = "participant"
    SPONSOR = "sponsor"
    ADMIN = "admin"


class RegistrationStatus(Enum):
    REGISTERED = "registered"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


class NpsBucket(Enum):
    PROMOTER = "Promoter"
    PASSIVE = "Passive"
    DETRACTOR = "Detractor"


# Statuses that hold a seat at an event
ACTIVE_STATUSES = [RegistrationStatus.REGISTERED.value, RegistrationStatus.ATTENDED.value]
