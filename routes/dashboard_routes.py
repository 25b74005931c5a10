"""
Dashboard routes blueprint.
"""
from flask import Blueprint, g, jsonify, request, current_app

from services.dashboard_service import get_dashboard_activity, get_dashboard_stats
from utils.auth_utils import login_required
from utils.validators import ActivityQuery

# Create blueprint
dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


@dashboard_bp.route('/stats', methods=['GET'])
@login_required
def stats():
    config = current_app.config['CONFIG']
    return jsonify(get_dashboard_stats(g.user_id, config))


@dashboard_bp.route('/activity', methods=['GET'])
@login_required
def activity():
    """Recently created applications, resumes and cover letters"""
    config = current_app.config['CONFIG']
    query = ActivityQuery.model_validate(request.args.to_dict())
    return jsonify(get_dashboard_activity(g.user_id, config, activity_type=query.type,
                                          limit=query.limit, offset=query.offset or 0))
