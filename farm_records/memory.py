from farm_records.models import (Crop, CropRecommendation, Farm, User, WeatherObservation,
                                 new_id, utcnow)
from farm_records.storage import DuplicateRecordError, Storage


class MemoryStorage(Storage):
    """In-process storage, one dict per entity keyed by id. Records are never
    attached to a database session."""

    def __init__(self):
        self.users = {}
        self.farms = {}
        self.crops = {}
        self.weather = {}
        self.recommendations = {}

    @staticmethod
    def _insert(table, model, data):
        record = model(id=new_id(), created_at=utcnow(), **data)
        table[record.id] = record
        return record

    @staticmethod
    def _update(table, record_id, data):
        record = table.get(record_id)
        if record is None:
            return None
        for key, value in data.items():
            setattr(record, key, value)
        return record

    @staticmethod
    def _delete(table, record_id):
        return table.pop(record_id, None) is not None

    # users
    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_username(self, username):
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, data):
        if self.get_user_by_username(data['username']):
            raise DuplicateRecordError(f"username {data['username']!r} is taken")
        email = data.get('email')
        if email and any(u.email == email for u in self.users.values()):
            raise DuplicateRecordError(f'email {email!r} is taken')
        return self._insert(self.users, User, data)

    # farms
    def get_farms_by_user_id(self, user_id):
        return [f for f in self.farms.values() if f.user_id == user_id]

    def get_farm(self, farm_id):
        return self.farms.get(farm_id)

    def create_farm(self, data):
        return self._insert(self.farms, Farm, data)

    def update_farm(self, farm_id, data):
        return self._update(self.farms, farm_id, data)

    def delete_farm(self, farm_id):
        return self._delete(self.farms, farm_id)

    # crops
    def get_crops_by_farm_id(self, farm_id):
        return [c for c in self.crops.values() if c.farm_id == farm_id]

    def get_crop(self, crop_id):
        return self.crops.get(crop_id)

    def create_crop(self, data):
        data = {'status': 'planned', **data}
        return self._insert(self.crops, Crop, data)

    def update_crop(self, crop_id, data):
        return self._update(self.crops, crop_id, data)

    def delete_crop(self, crop_id):
        return self._delete(self.crops, crop_id)

    # weather
    def get_weather_by_farm_id(self, farm_id):
        return [w for w in self.weather.values() if w.farm_id == farm_id]

    def get_weather_data(self, weather_id):
        return self.weather.get(weather_id)

    def get_latest_weather(self, farm_id):
        return max(self.get_weather_by_farm_id(farm_id), key=lambda w: w.date, default=None)

    def create_weather_data(self, data):
        return self._insert(self.weather, WeatherObservation, data)

    def delete_weather_data(self, weather_id):
        return self._delete(self.weather, weather_id)

    # crop recommendations
    def get_crop_recommendations_by_user_id(self, user_id):
        # reversed first so that equal timestamps keep newest-inserted first
        owned = [r for r in reversed(list(self.recommendations.values())) if r.user_id == user_id]
        return sorted(owned, key=lambda r: r.created_at, reverse=True)

    def get_crop_recommendation(self, recommendation_id):
        return self.recommendations.get(recommendation_id)

    def create_crop_recommendation(self, data):
        return self._insert(self.recommendations, CropRecommendation, data)

    def delete_crop_recommendation(self, recommendation_id):
        return self._delete(self.recommendations, recommendation_id)
