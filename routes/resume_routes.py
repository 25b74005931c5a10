"""
Resume-related routes blueprint.
"""
from flask import Blueprint, g, jsonify, request, current_app

from services.resume_service import (
    create_resume as create_resume_service,
    delete_resume as delete_resume_service,
    get_resume as get_resume_service,
    get_resumes,
    update_resume as update_resume_service,
)
from utils.auth_utils import login_required
from utils.validators import ResumeRequest, ResumesQuery, UpdateResumeRequest, parse_body

# Create blueprint
resume_bp = Blueprint('resume', __name__, url_prefix='/api/resumes')


@resume_bp.route('', methods=['GET'])
@login_required
def list_resumes():
    """Get the user's resumes, most recently updated first"""
    config = current_app.config['CONFIG']
    query = ResumesQuery.model_validate(request.args.to_dict())
    resumes = get_resumes(
        g.user_id, config,
        is_default=query.is_default,
        is_tailored=query.is_tailored,
        job_application_id=query.job_application_id,
        limit=query.limit,
        offset=query.offset,
    )
    return jsonify(resumes)


@resume_bp.route('', methods=['POST'])
@login_required
def create_resume():
    """Create a resume; a new default replaces the previous one"""
    config = current_app.config['CONFIG']
    data = parse_body(ResumeRequest, request.get_json(silent=True))
    resume = create_resume_service(g.user_id, data.model_dump(), config)
    return jsonify(resume), 201


@resume_bp.route('/<resume_id>', methods=['GET'])
@login_required
def get_resume(resume_id):
    config = current_app.config['CONFIG']
    return jsonify(get_resume_service(resume_id, g.user_id, config))


@resume_bp.route('/<resume_id>', methods=['PUT'])
@login_required
def update_resume(resume_id):
    config = current_app.config['CONFIG']
    data = parse_body(UpdateResumeRequest, request.get_json(silent=True))
    resume = update_resume_service(resume_id, g.user_id, data.model_dump(exclude_unset=True), config)
    return jsonify(resume)


@resume_bp.route('/<resume_id>', methods=['DELETE'])
@login_required
def delete_resume(resume_id):
    config = current_app.config['CONFIG']
    delete_resume_service(resume_id, g.user_id, config)
    return jsonify({"success": True})
