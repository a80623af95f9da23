from flask import Blueprint, current_app
from flask.views import MethodView
from flask_login import login_required

from farm_records.routes.common import access_denied, get_storage, handle_errors, owned_farm, parse
from farm_records.schemas import CropCreate, CropOut, CropUpdate, dump, dump_list

crop_bp = Blueprint('crops', __name__)


def owned_crop(crop_id):
    """The crop if its parent farm belongs to the session user, else None."""
    crop = get_storage().get_crop(crop_id)
    if crop is None or owned_farm(crop.farm_id) is None:
        return None
    return crop


# 3. Resource: Crops
"""
crops are always reached through a farm the user owns
"""
class FarmCropList(MethodView):
    decorators = [login_required]

    # get: crops of one farm
    @handle_errors('Failed to get crops')
    def get(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        crops = get_storage().get_crops_by_farm_id(farm_id)
        return {'crops': dump_list(CropOut, crops)}

    # post: plant a crop on the farm from the url
    @handle_errors('Failed to create crop')
    def post(self, farm_id):
        if owned_farm(farm_id) is None:
            return access_denied()

        data, problem = parse(CropCreate)
        if problem:
            return problem

        data['farm_id'] = farm_id
        crop = get_storage().create_crop(data)
        current_app.logger.info("Created crop %s on farm %s", crop.id, farm_id)
        return {'crop': dump(CropOut, crop)}, 201


class CropResource(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to get crop')
    def get(self, crop_id):
        crop = owned_crop(crop_id)
        if crop is None:
            return access_denied()
        return {'crop': dump(CropOut, crop)}

    # patch: e.g. move status from planted to growing, record actual yield
    @handle_errors('Failed to update crop')
    def patch(self, crop_id):
        if owned_crop(crop_id) is None:
            return access_denied()

        data, problem = parse(CropUpdate, partial=True)
        if problem:
            return problem

        crop = get_storage().update_crop(crop_id, data)
        if crop is None:
            return access_denied()
        return {'crop': dump(CropOut, crop)}

    @handle_errors('Failed to delete crop')
    def delete(self, crop_id):
        if owned_crop(crop_id) is None:
            return access_denied()

        if not get_storage().delete_crop(crop_id):
            return access_denied()
        current_app.logger.info("Deleted crop %s", crop_id)
        return {'message': 'Crop deleted'}


crop_bp.add_url_rule('/farms/<farm_id>/crops', view_func=FarmCropList.as_view('farm_crop_list'))
crop_bp.add_url_rule('/crops/<crop_id>', view_func=CropResource.as_view('crop'))
