import logging

from sqlalchemy.exc import IntegrityError

from ella_rises.extensions import db
from ella_rises.repositories import SurveyRepository
from ella_rises.utils.clock import now_local

logger = logging.getLogger(__name__)


class SurveyService:
    @staticmethod
    def save_survey(attrs: dict):
        """Insert or update the single survey for a registration.

        Existing rows for the registration are locked, the oldest is updated
        in place and any stray duplicates are removed, all in one commit.
        """
        attrs = dict(attrs)
        registration_id = attrs["event_registration_id"]
        now = now_local()
        if attrs.get("submission_date") is None:
            attrs["submission_date"] = now.date()
        if attrs.get("submission_time") is None:
            attrs["submission_time"] = now.time().replace(microsecond=0)

        for attempt in range(2):
            try:
                existing = SurveyRepository.find_for_registration(
                    registration_id, lock=True
                )
                if existing:
                    survey = existing[0]
                    for key, value in attrs.items():
                        setattr(survey, key, value)
                    if len(existing) > 1:
                        logger.warning(
                            f"Removing {len(existing) - 1} duplicate surveys for "
                            f"registration {registration_id}"
                        )
                        SurveyRepository.delete_many(existing[1:])
                    logger.info(
                        f"Updated survey {survey.survey_id} for registration {registration_id}"
                    )
                else:
                    survey = SurveyRepository.add(attrs)
                    logger.info(
                        f"Created survey {survey.survey_id} for registration {registration_id}"
                    )
                db.session.commit()
                return survey
            except IntegrityError:
                db.session.rollback()
                # A concurrent insert won the unique constraint; update it instead
                if attempt:
                    raise
                logger.warning(
                    f"Survey insert conflict for registration {registration_id}, retrying as update"
                )
