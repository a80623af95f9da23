from flask import Blueprint, current_app
from flask.views import MethodView
from flask_login import current_user, login_required

from farm_records.routes.common import access_denied, get_storage, handle_errors, owned_farm, parse
from farm_records.schemas import FarmCreate, FarmOut, FarmUpdate, dump, dump_list

farm_bp = Blueprint('farms', __name__)


# 2. Resource: Farms
"""
the farms owned by the logged-in user
"""
class FarmList(MethodView):
    decorators = [login_required]

    # get: list the user's farms
    @handle_errors('Failed to get farms')
    def get(self):
        farms = get_storage().get_farms_by_user_id(current_user.id)
        return {'farms': dump_list(FarmOut, farms)}

    # post: add a farm, always owned by the session user
    @handle_errors('Failed to create farm')
    def post(self):
        data, problem = parse(FarmCreate)
        if problem:
            return problem

        data['user_id'] = current_user.id
        farm = get_storage().create_farm(data)
        current_app.logger.info("Created farm %s for user %s", farm.id, current_user.id)
        return {'farm': dump(FarmOut, farm)}, 201


class FarmResource(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to get farm')
    def get(self, farm_id):
        farm = owned_farm(farm_id)
        if farm is None:
            return access_denied()
        return {'farm': dump(FarmOut, farm)}

    # patch: update the supplied fields only
    @handle_errors('Failed to update farm')
    def patch(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        data, problem = parse(FarmUpdate, partial=True)
        if problem:
            return problem

        farm = get_storage().update_farm(farm_id, data)
        if farm is None:
            return access_denied()
        return {'farm': dump(FarmOut, farm)}

    # delete: crops and weather of the farm stay in place
    @handle_errors('Failed to delete farm')
    def delete(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        if not get_storage().delete_farm(farm_id):
            return access_denied()
        current_app.logger.info("Deleted farm %s", farm_id)
        return {'message': 'Farm deleted'}


farm_bp.add_url_rule('/farms', view_func=FarmList.as_view('farm_list'))
farm_bp.add_url_rule('/farms/<farm_id>', view_func=FarmResource.as_view('farm'))
