import uuid
from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import check_password_hash

from farm_records.extensions import db

CROP_STATUSES = ('planned', 'planted', 'growing', 'harvested')


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


# users table
class User(UserMixin, db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(120), unique=True)
    farm_name = db.Column(db.String(120))
    location = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=utcnow)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.username}>'


# farm table
class Farm(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    location = db.Column(db.String(120), nullable=False)
    size = db.Column(db.Float)  # acres
    soil_type = db.Column(db.String(50))
    coordinates = db.Column(db.JSON)  # {"lat": ..., "lng": ...}
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<Farm {self.name}>'


# crop table
class Crop(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    farm_id = db.Column(db.String(36), db.ForeignKey('farm.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    variety = db.Column(db.String(120))
    planted_date = db.Column(db.DateTime)
    expected_harvest_date = db.Column(db.DateTime)
    area = db.Column(db.Float)  # acres
    status = db.Column(db.Enum(*CROP_STATUSES, name='crop_status'), default='planned', nullable=False)
    predicted_yield = db.Column(db.Float)
    actual_yield = db.Column(db.Float)
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<Crop {self.name} ({self.status})>'


# weather observation table
class WeatherObservation(db.Model):
    __tablename__ = 'weather_data'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    farm_id = db.Column(db.String(36), db.ForeignKey('farm.id'), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False)
    temperature = db.Column(db.Float)
    humidity = db.Column(db.Float)
    precipitation = db.Column(db.Float)
    wind_speed = db.Column(db.Float)
    conditions = db.Column(db.String(120))
    forecast = db.Column(db.JSON)  # opaque, supplied by the client
    created_at = db.Column(db.DateTime, default=utcnow)


# crop recommendation table
class CropRecommendation(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    farm_id = db.Column(db.String(36), db.ForeignKey('farm.id'), nullable=True)
    recommended_crops = db.Column(db.JSON)
    factors = db.Column(db.JSON)
    confidence = db.Column(db.Float)  # 0-100, checked on input only
    created_at = db.Column(db.DateTime, default=utcnow)
