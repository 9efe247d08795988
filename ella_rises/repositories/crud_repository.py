from ella_rises.extensions import db


class CrudRepository:
    @staticmethod
    def get(model, primary_key: str, record_id):
        return model.query.filter(getattr(model, primary_key) == record_id).first()

    @staticmethod
    def create(model, attrs: dict):
        record = model(**attrs)
        db.session.add(record)
        db.session.commit()
        return record

    @staticmethod
    def update(record, attrs: dict):
        for key, value in attrs.items():
            if hasattr(record, key):
                setattr(record, key, value)
        db.session.commit()
        return record

    @staticmethod
    def delete(record):
        db.session.delete(record)
        db.session.commit()
