from concurrent.futures import ThreadPoolExecutor

from flask import Blueprint, current_app
from flask.views import MethodView
from flask_login import current_user, login_required

from farm_records.routes.common import get_storage, handle_errors
from farm_records.schemas import (CropOut, Dashboard, DashboardSummary, FarmOut, FarmSnapshot,
                                  RecommendationOut, WeatherOut)

dashboard_bp = Blueprint('dashboard', __name__)

RECENT_RECOMMENDATIONS = 5


def farm_snapshot(app, storage, farm):
    """Crops and latest weather of one farm, read in its own app context."""
    with app.app_context():
        crops = storage.get_crops_by_farm_id(farm.id)
        latest = storage.get_latest_weather(farm.id)
        return FarmSnapshot(
            **farm.model_dump(),
            crops=[CropOut.model_validate(c) for c in crops],
            latest_weather=WeatherOut.model_validate(latest) if latest else None,
        )


def build_dashboard(user_id):
    """Aggregate everything the user owns.

    Per-farm reads fan out over a thread pool. The reads are independent, so
    a crop written while this runs may or may not show up.
    """
    app = current_app._get_current_object()
    storage = get_storage()

    farms = [FarmOut.model_validate(f) for f in storage.get_farms_by_user_id(user_id)]
    recommendations = storage.get_crop_recommendations_by_user_id(user_id)

    with ThreadPoolExecutor(max_workers=max(1, app.config['DASHBOARD_WORKERS'])) as pool:
        snapshots = list(pool.map(lambda farm: farm_snapshot(app, storage, farm), farms))

    summary = DashboardSummary(
        total_farms=len(snapshots),
        total_crops=sum(len(s.crops) for s in snapshots),
        active_crops=sum(1 for s in snapshots for c in s.crops if c.status == 'growing'),
    )
    return Dashboard(
        farms=snapshots,
        recommendations=[RecommendationOut.model_validate(r)
                         for r in recommendations[:RECENT_RECOMMENDATIONS]],
        summary=summary,
    )


# 6. Resource: Dashboard
class DashboardResource(MethodView):
    decorators = [login_required]

    @handle_errors('Failed to get dashboard data')
    def get(self):
        return build_dashboard(current_user.id).model_dump(mode='json', by_alias=True)


dashboard_bp.add_url_rule('/dashboard', view_func=DashboardResource.as_view('dashboard'))
