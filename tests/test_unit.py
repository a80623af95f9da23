import json
import logging
import uuid
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError
from werkzeug.security import generate_password_hash

from farm_records import create_app
from farm_records.memory import MemoryStorage
from farm_records.models import CROP_STATUSES, Crop, User, new_id
from farm_records.routes.common import error, handle_errors
from farm_records.schemas import (CropCreate, CropStatus, CropUpdate, FarmCreate, FarmUpdate,
                                  RecommendationCreate, UserCreate, UserOut, WeatherCreate, dump,
                                  to_naive_utc, validate_email_format, validation_details)
from farm_records.storage import DatabaseStorage

user_name = "gizem"
user_password = "Gizem.123"


# 1. Unit Test: email format check
def test_email_validation():
    assert validate_email_format("test@example.com") is True
    assert validate_email_format("user.name@domain.co") is True
    assert validate_email_format("testexample.com") is False
    assert validate_email_format("@example.com") is False
    assert validate_email_format("") is False
    assert validate_email_format(None) is False


# 2. Unit Test: registration body needs username and password, email must look like one
def test_user_create_schema():
    user = UserCreate.model_validate({"username": "  gizem ", "password": user_password})
    assert user.username == "gizem"
    assert user.email is None

    with pytest.raises(ValidationError):
        UserCreate.model_validate({"username": user_name})

    with pytest.raises(ValidationError):
        UserCreate.model_validate({"username": "   ", "password": user_password})

    with pytest.raises(ValidationError):
        UserCreate.model_validate({"username": user_name, "password": user_password, "email": "nope"})


# 3. Unit Test: farm name and location are required, owner in the body is dropped
def test_farm_create_schema():
    with pytest.raises(ValidationError) as exc:
        FarmCreate.model_validate({"size": 10})
    missing = {tuple(issue["loc"]) for issue in validation_details(exc.value)}
    assert missing == {("name",), ("location",)}

    farm = FarmCreate.model_validate({
        "name": "North field",
        "location": "Konya",
        "user_id": "someone-else",
        "coordinates": {"lat": 37.87, "lng": 32.48}
    })
    data = farm.model_dump()
    assert "user_id" not in data
    assert data["coordinates"] == {"lat": 37.87, "lng": 32.48}


# 4. Unit Test: crop status defaults to planned and only accepts the known statuses
def test_crop_status():
    assert set(CropStatus.__args__) == set(CROP_STATUSES)
    assert CropCreate.model_validate({"name": "wheat"}).status == "planned"
    assert CropCreate.model_validate({"name": "wheat", "status": "growing"}).status == "growing"

    with pytest.raises(ValidationError):
        CropCreate.model_validate({"name": "wheat", "status": "rotten"})


# 5. Unit Test: partial updates keep only the keys that were sent
def test_partial_update_schema():
    update = CropUpdate.model_validate({"status": "harvested", "actual_yield": 4.2})
    assert update.model_dump(exclude_unset=True) == {"status": "harvested", "actual_yield": 4.2}

    assert FarmUpdate.model_validate({}).model_dump(exclude_unset=True) == {}
    assert FarmUpdate.model_validate({"soil_type": None}).model_dump(exclude_unset=True) == {"soil_type": None}

    with pytest.raises(ValidationError):
        FarmUpdate.model_validate({"name": None})
    with pytest.raises(ValidationError):
        CropUpdate.model_validate({"status": None})


# 6. Unit Test: recommendation confidence must be between 0 and 100
def test_recommendation_confidence_bounds():
    assert RecommendationCreate.model_validate({"confidence": 0}).confidence == 0
    assert RecommendationCreate.model_validate({"confidence": 100}).confidence == 100

    for bad in (-1, 100.5):
        with pytest.raises(ValidationError):
            RecommendationCreate.model_validate({"confidence": bad})


# 7. Unit Test: weather needs a date and timezone aware dates become naive utc
def test_weather_dates():
    with pytest.raises(ValidationError):
        WeatherCreate.model_validate({"temperature": 21.5})

    weather = WeatherCreate.model_validate({"date": "2024-03-01T12:00:00+03:00"})
    assert weather.date == datetime(2024, 3, 1, 9, 0)
    assert weather.date.tzinfo is None

    aware = datetime(2024, 1, 1, 6, 30, tzinfo=timezone.utc)
    assert to_naive_utc(aware) == datetime(2024, 1, 1, 6, 30)
    assert to_naive_utc(None) is None


# 8. Unit Test: validation details can always be sent as json
def test_validation_details_are_json():
    with pytest.raises(ValidationError) as exc:
        UserCreate.model_validate({"username": user_name, "password": user_password, "email": "bad"})

    details = validation_details(exc.value)
    json.dumps(details)
    assert details[0]["loc"] == ["email"]
    assert "msg" in details[0] and "type" in details[0]


# 9. Unit Test: password check against a werkzeug hash
def test_user_check_password():
    user = User(username=user_name, password_hash=generate_password_hash(user_password))

    assert user.check_password(user_password) is True
    assert user.check_password("wrong") is False


# 10. Unit Test: serialized users never contain the password hash
def test_user_out_hides_password():
    user = User(id=new_id(), username=user_name, password_hash="hash", created_at=datetime(2024, 1, 1))
    data = dump(UserOut, user)

    assert data["username"] == user_name
    assert data["created_at"] == "2024-01-01T00:00:00"
    assert "password" not in data and "password_hash" not in data
    assert dump(UserOut, None) is None


# 11. Unit Test: generated ids are fresh uuids
def test_new_id():
    ids = {new_id() for _ in range(100)}
    assert len(ids) == 100
    uuid.UUID(next(iter(ids)))


# 12. Unit Test: error body shape
def test_error_body():
    assert error("Access denied", 403) == ({"error": "Access denied"}, 403)
    assert error("Invalid input", 400, [])[0] == {"error": "Invalid input", "details": []}


# 13. Unit Test: unexpected exceptions become a generic 500 without internal detail
def test_handle_errors(app):
    @handle_errors("Failed to do the thing")
    def broken():
        raise RuntimeError("connection string with password")

    with app.app_context():
        body, status = broken()

    assert status == 500
    assert body == {"error": "Failed to do the thing"}


# 14. Unit Test: app factory picks the config and the storage
def test_create_app_storage(app, memory_app):
    assert app.config["TESTING"] is True
    assert isinstance(app.extensions["storage"], DatabaseStorage)
    assert isinstance(memory_app.extensions["storage"], MemoryStorage)


# 15. Unit Test: memory storage hands back model instances with defaults filled in
def test_memory_storage_records():
    storage = MemoryStorage()
    crop = storage.create_crop({"farm_id": "f1", "name": "barley"})

    assert isinstance(crop, Crop)
    assert crop.status == "planned"
    assert crop.id and crop.created_at is not None


# 16. Unit Test: building an app leaves the root logger alone
def test_create_app_keeps_root_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda *a, **kw: calls.append(kw))

    app = create_app('test')

    assert calls == []
    assert app.logger.level == logging.getLevelName(app.config["LOG_LEVEL"])
