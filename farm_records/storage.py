"""
Storage layer.

``Storage`` lists the CRUD operations the request handlers rely on, one method
per (entity, operation). ``DatabaseStorage`` maps them onto Flask-SQLAlchemy;
``farm_records.memory.MemoryStorage`` keeps everything in dicts and is used as
a test double. Both hand back the model classes from ``farm_records.models``.

Contract shared by every implementation:

* lookups by id return the record or ``None``, never raise for a missing row
* list lookups return a (possibly empty) list
* ``create_*`` takes validated field data without id/created_at and returns
  the stored record
* ``update_*`` applies only the supplied fields and returns the record, or
  ``None`` if the id is unknown
* ``delete_*`` returns whether a row was actually removed

Calls are independent of each other; nothing spans more than one entity.
"""
from abc import ABC, abstractmethod

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from farm_records.extensions import db
from farm_records.models import Crop, CropRecommendation, Farm, User, WeatherObservation


class StorageError(Exception):
    pass


class DuplicateRecordError(StorageError):
    """A unique column (username, email) already holds the value."""


def is_unique_violation(e):
    """True for IntegrityErrors raised by a UNIQUE constraint (sqlite or postgres)."""
    if getattr(e.orig, 'sqlstate', None) == '23505':
        return True
    msg = str(getattr(e, 'orig', e))
    return 'UNIQUE constraint failed' in msg or 'unique constraint' in msg


class Storage(ABC):
    # users
    @abstractmethod
    def get_user(self, user_id): ...

    @abstractmethod
    def get_user_by_username(self, username): ...

    @abstractmethod
    def create_user(self, data): ...

    # farms
    @abstractmethod
    def get_farms_by_user_id(self, user_id): ...

    @abstractmethod
    def get_farm(self, farm_id): ...

    @abstractmethod
    def create_farm(self, data): ...

    @abstractmethod
    def update_farm(self, farm_id, data): ...

    @abstractmethod
    def delete_farm(self, farm_id): ...

    # crops
    @abstractmethod
    def get_crops_by_farm_id(self, farm_id): ...

    @abstractmethod
    def get_crop(self, crop_id): ...

    @abstractmethod
    def create_crop(self, data): ...

    @abstractmethod
    def update_crop(self, crop_id, data): ...

    @abstractmethod
    def delete_crop(self, crop_id): ...

    # weather
    @abstractmethod
    def get_weather_by_farm_id(self, farm_id): ...

    @abstractmethod
    def get_weather_data(self, weather_id): ...

    @abstractmethod
    def get_latest_weather(self, farm_id):
        """Observation with the greatest ``date`` for the farm, or None."""

    @abstractmethod
    def create_weather_data(self, data): ...

    @abstractmethod
    def delete_weather_data(self, weather_id): ...

    # crop recommendations
    @abstractmethod
    def get_crop_recommendations_by_user_id(self, user_id):
        """Newest first."""

    @abstractmethod
    def get_crop_recommendation(self, recommendation_id): ...

    @abstractmethod
    def create_crop_recommendation(self, data): ...

    @abstractmethod
    def delete_crop_recommendation(self, recommendation_id): ...


class DatabaseStorage(Storage):
    """Storage backed by the Flask-SQLAlchemy session of the current app context."""

    def _add(self, record):
        db.session.add(record)
        self._commit()
        return record

    def _update(self, model, record_id, data):
        record = db.session.get(model, record_id)
        if record is None:
            return None
        for key, value in data.items():
            setattr(record, key, value)
        self._commit()
        return record

    def _delete(self, model, record_id):
        deleted = db.session.query(model).filter_by(id=record_id).delete()
        self._commit()
        return deleted > 0

    def _commit(self):
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    # users
    def get_user(self, user_id):
        return db.session.get(User, user_id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def create_user(self, data):
        user = User(**data)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if is_unique_violation(e):
                raise DuplicateRecordError(str(e.orig)) from e
            raise
        return user

    # farms
    def get_farms_by_user_id(self, user_id):
        return Farm.query.filter_by(user_id=user_id).all()

    def get_farm(self, farm_id):
        return db.session.get(Farm, farm_id)

    def create_farm(self, data):
        return self._add(Farm(**data))

    def update_farm(self, farm_id, data):
        return self._update(Farm, farm_id, data)

    def delete_farm(self, farm_id):
        return self._delete(Farm, farm_id)

    # crops
    def get_crops_by_farm_id(self, farm_id):
        return Crop.query.filter_by(farm_id=farm_id).all()

    def get_crop(self, crop_id):
        return db.session.get(Crop, crop_id)

    def create_crop(self, data):
        return self._add(Crop(**data))

    def update_crop(self, crop_id, data):
        return self._update(Crop, crop_id, data)

    def delete_crop(self, crop_id):
        return self._delete(Crop, crop_id)

    # weather
    def get_weather_by_farm_id(self, farm_id):
        return WeatherObservation.query.filter_by(farm_id=farm_id).all()

    def get_weather_data(self, weather_id):
        return db.session.get(WeatherObservation, weather_id)

    def get_latest_weather(self, farm_id):
        return (WeatherObservation.query
                .filter_by(farm_id=farm_id)
                .order_by(WeatherObservation.date.desc())
                .first())

    def create_weather_data(self, data):
        return self._add(WeatherObservation(**data))

    def delete_weather_data(self, weather_id):
        return self._delete(WeatherObservation, weather_id)

    # crop recommendations
    def get_crop_recommendations_by_user_id(self, user_id):
        return (CropRecommendation.query
                .filter_by(user_id=user_id)
                .order_by(CropRecommendation.created_at.desc())
                .all())

    def get_crop_recommendation(self, recommendation_id):
        return db.session.get(CropRecommendation, recommendation_id)

    def create_crop_recommendation(self, data):
        return self._add(CropRecommendation(**data))

    def delete_crop_recommendation(self, recommendation_id):
        return self._delete(CropRecommendation, recommendation_id)
