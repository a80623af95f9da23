from flask import Blueprint, current_app
from flask.views import MethodView
from flask_login import current_user, login_required

from farm_records.routes.common import access_denied, get_storage, handle_errors, owned_farm, parse
from farm_records.schemas import RecommendationCreate, RecommendationOut, dump, dump_list

recommendation_bp = Blueprint('recommendations', __name__)


# 5. Resource: Crop recommendations
"""
recommendations are opaque records supplied by the client, nothing is derived here
"""
class RecommendationList(MethodView):
    decorators = [login_required]

    # get: newest first
    @handle_errors('Failed to get recommendations')
    def get(self):
        recommendations = get_storage().get_crop_recommendations_by_user_id(current_user.id)
        return {'recommendations': dump_list(RecommendationOut, recommendations)}

    @handle_errors('Failed to create recommendation')
    def post(self):
        data, problem = parse(RecommendationCreate)
        if problem:
            return problem

        if data.get('farm_id') is not None and owned_farm(data['farm_id']) is None:
            return access_denied()

        data['user_id'] = current_user.id
        recommendation = get_storage().create_crop_recommendation(data)
        current_app.logger.info("Created recommendation %s for user %s", recommendation.id, current_user.id)
        return {'recommendation': dump(RecommendationOut, recommendation)}, 201


class RecommendationResource(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to delete recommendation')
    def delete(self, recommendation_id):
        storage = get_storage()
        recommendation = storage.get_crop_recommendation(recommendation_id)
        if recommendation is None or recommendation.user_id != current_user.id:
            current_app.logger.warning("Recommendation access denied: %s", recommendation_id)
            return access_denied()

        if not storage.delete_crop_recommendation(recommendation_id):
            return access_denied()
        return {'message': 'Recommendation deleted'}


recommendation_bp.add_url_rule('/recommendations', view_func=RecommendationList.as_view('recommendation_list'))
recommendation_bp.add_url_rule('/recommendations/<recommendation_id>',
                               view_func=RecommendationResource.as_view('recommendation'))
