from flask import Blueprint, current_app
from flask.views import MethodView
from flask_login import login_required

from farm_records.routes.common import access_denied, get_storage, handle_errors, owned_farm, parse
from farm_records.schemas import WeatherCreate, WeatherOut, dump, dump_list

weather_bp = Blueprint('weather', __name__)


# 4. Resource: Weather
"""
weather observations recorded for a farm; append and delete only
"""
class FarmWeatherList(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to get weather data')
    def get(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        observations = get_storage().get_weather_by_farm_id(farm_id)
        return {'weather': dump_list(WeatherOut, observations)}

    @handle_errors('Failed to create weather data')
    def post(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        data, problem = parse(WeatherCreate)
        if problem:
            return problem

        data['farm_id'] = farm_id
        observation = get_storage().create_weather_data(data)
        current_app.logger.info("Recorded weather %s for farm %s", observation.id, farm_id)
        return {'weather': dump(WeatherOut, observation)}, 201


class LatestFarmWeather(MethodView):
    decorators = [login_required]

    # get: the observation with the latest date, null when there is none
    @handle_errors('Failed to get latest weather')
    def get(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        observation = get_storage().get_latest_weather(farm_id)
        return {'weather': dump(WeatherOut, observation)}


class WeatherResource(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to delete weather data')
    def delete(self, weather_id):
        storage = get_storage()
        observation = storage.get_weather_data(weather_id)
        if observation is None or owned_farm(observation.farm_id) is None:
            return access_denied()

        if not storage.delete_weather_data(weather_id):
            return access_denied()
        current_app.logger.info("Deleted weather %s", weather_id)
        return {'message': 'Weather data deleted'}


weather_bp.add_url_rule('/farms/<farm_id>/weather', view_func=FarmWeatherList.as_view('farm_weather_list'))
weather_bp.add_url_rule('/farms/<farm_id>/weather/latest', view_func=LatestFarmWeather.as_view('latest_farm_weather'))
weather_bp.add_url_rule('/weather/<weather_id>', view_func=WeatherResource.as_view('weather'))
