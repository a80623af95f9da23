"""
Request and response schemas.

Each create/update payload is validated here before it reaches the storage
layer. Update schemas carry only optional fields; callers apply
``model_dump(exclude_unset=True)`` so that absent keys are left untouched.

The ``*Out`` schemas serialize stored records to JSON. ``UserOut`` has no
password field, so a hash can never leave the server.
"""
import json
import re
from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# mirrors models.CROP_STATUSES
CropStatus = Literal['planned', 'planted', 'growing', 'harvested']


def validate_email_format(email):
    if not email:
        return False
    pattern = r'^[\w\.-]+@[\w\.-]+\.\w+$'
    return bool(re.match(pattern, email))


def to_naive_utc(value):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def validation_details(exc: ValidationError):
    # round trip through json so ctx values (exceptions, decimals) become plain data
    return json.loads(exc.json(include_url=False))


def _not_null(value):
    if value is None:
        raise ValueError('may not be null')
    return value


# users

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=80)
    password: str = Field(min_length=1)
    email: Optional[str] = None
    farm_name: Optional[str] = None
    location: Optional[str] = None

    @field_validator('username')
    @classmethod
    def strip_username(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('username may not be blank')
        return v

    @field_validator('email')
    @classmethod
    def check_email(cls, v):
        if v is not None and not validate_email_format(v):
            raise ValueError('invalid email format')
        return v


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


# farms

class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class FarmCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    location: str = Field(min_length=1, max_length=120)
    size: Optional[float] = Field(None, ge=0)
    soil_type: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class FarmUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    location: Optional[str] = Field(None, min_length=1, max_length=120)
    size: Optional[float] = Field(None, ge=0)
    soil_type: Optional[str] = None
    coordinates: Optional[Coordinates] = None

    @field_validator('name', 'location')
    @classmethod
    def required_not_null(cls, v):
        return _not_null(v)


# crops

class CropCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    variety: Optional[str] = None
    planted_date: Optional[datetime] = None
    expected_harvest_date: Optional[datetime] = None
    area: Optional[float] = Field(None, ge=0)
    status: CropStatus = 'planned'
    predicted_yield: Optional[float] = None
    actual_yield: Optional[float] = None

    @field_validator('planted_date', 'expected_harvest_date')
    @classmethod
    def naive_dates(cls, v):
        return to_naive_utc(v)


class CropUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    variety: Optional[str] = None
    planted_date: Optional[datetime] = None
    expected_harvest_date: Optional[datetime] = None
    area: Optional[float] = Field(None, ge=0)
    status: Optional[CropStatus] = None
    predicted_yield: Optional[float] = None
    actual_yield: Optional[float] = None

    @field_validator('name', 'status')
    @classmethod
    def required_not_null(cls, v):
        return _not_null(v)

    @field_validator('planted_date', 'expected_harvest_date')
    @classmethod
    def naive_dates(cls, v):
        return to_naive_utc(v)


# weather

class WeatherCreate(BaseModel):
    date: datetime
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    precipitation: Optional[float] = None
    wind_speed: Optional[float] = None
    conditions: Optional[str] = None
    forecast: Optional[Any] = None

    @field_validator('date')
    @classmethod
    def naive_date(cls, v):
        return to_naive_utc(v)


# recommendations

class RecommendationCreate(BaseModel):
    farm_id: Optional[str] = None
    recommended_crops: Optional[Any] = None
    factors: Optional[Any] = None
    confidence: Optional[float] = Field(None, ge=0, le=100)


# responses

class RecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None


class UserOut(RecordOut):
    username: str
    email: Optional[str] = None
    farm_name: Optional[str] = None
    location: Optional[str] = None


class FarmOut(RecordOut):
    user_id: str
    name: str
    location: str
    size: Optional[float] = None
    soil_type: Optional[str] = None
    coordinates: Optional[Any] = None


class CropOut(RecordOut):
    farm_id: str
    name: str
    variety: Optional[str] = None
    planted_date: Optional[datetime] = None
    expected_harvest_date: Optional[datetime] = None
    area: Optional[float] = None
    status: str
    predicted_yield: Optional[float] = None
    actual_yield: Optional[float] = None


class WeatherOut(RecordOut):
    farm_id: str
    date: datetime
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    precipitation: Optional[float] = None
    wind_speed: Optional[float] = None
    conditions: Optional[str] = None
    forecast: Optional[Any] = None


class RecommendationOut(RecordOut):
    user_id: str
    farm_id: Optional[str] = None
    recommended_crops: Optional[Any] = None
    factors: Optional[Any] = None
    confidence: Optional[float] = None


# dashboard payload keys are camelCase, dump with by_alias=True

class FarmSnapshot(FarmOut):
    crops: List[CropOut] = []
    latest_weather: Optional[WeatherOut] = Field(None, serialization_alias='latestWeather')


class DashboardSummary(BaseModel):
    total_farms: int = Field(serialization_alias='totalFarms')
    total_crops: int = Field(serialization_alias='totalCrops')
    active_crops: int = Field(serialization_alias='activeCrops')


class Dashboard(BaseModel):
    farms: List[FarmSnapshot]
    recommendations: List[RecommendationOut]
    summary: DashboardSummary


def dump(schema, record):
    if record is None:
        return None
    return schema.model_validate(record).model_dump(mode='json')


def dump_list(schema, records):
    return [dump(schema, r) for r in records]
