from typing import List

from ella_rises.extensions import db
from ella_rises.models import Event, EventRegistration, SurveyResult, User


class SurveyRepository:
    """Survey queries. Writes here are flushed, not committed; callers own the transaction."""

    @staticmethod
    def find_for_registration(event_registration_id: int, lock=False) -> List[SurveyResult]:
        query = SurveyResult.query.filter_by(
            event_registration_id=event_registration_id
        ).order_by(SurveyResult.survey_id.asc())
        if lock:
            query = query.with_for_update()
        return query.all()

    @staticmethod
    def add(attrs) -> SurveyResult:
        survey = SurveyResult(**attrs)
        db.session.add(survey)
        db.session.flush()
        return survey

    @staticmethod
    def delete_many(surveys: List[SurveyResult]):
        for survey in surveys:
            db.session.delete(survey)
        db.session.flush()

    @staticmethod
    def find_with_context(survey_id: int):
        """Survey row joined to its event and participant for the edit form."""
        return (
            db.session.query(
                SurveyResult,
                Event.event_id,
                Event.event_name,
                Event.event_date,
                User.user_id,
            )
            .join(
                EventRegistration,
                SurveyResult.event_registration_id
                == EventRegistration.event_registration_id,
            )
            .join(Event, EventRegistration.event_id == Event.event_id)
            .join(User, EventRegistration.user_id == User.user_id)
            .filter(SurveyResult.survey_id == survey_id)
            .first()
        )
