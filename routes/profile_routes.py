"""
Profile routes blueprint: the user profile, its sections and resume import.
"""
from flask import Blueprint, g, jsonify, request, current_app

from services.profile_service import (
    PROFILE_SECTIONS,
    create_entry,
    create_profile as create_profile_service,
    delete_entry,
    get_entry,
    get_profile as get_profile_service,
    get_resume_data,
    list_entries,
    update_display_order,
    update_entry,
    update_profile as update_profile_service,
)
from services.resume_import_service import import_profile_from_resume
from utils.auth_utils import login_required
from utils.errors import ResumeImportError
from utils.validators import (
    AchievementRequest,
    BulkUpdateOrderRequest,
    CertificationRequest,
    EducationRequest,
    ProfileQuery,
    ProjectRequest,
    ReferenceRequest,
    SkillRequest,
    UpdateAchievementRequest,
    UpdateCertificationRequest,
    UpdateEducationRequest,
    UpdateProjectRequest,
    UpdateReferenceRequest,
    UpdateSkillRequest,
    UpdateUserProfileRequest,
    UpdateWorkExperienceRequest,
    UserProfileRequest,
    WorkExperienceRequest,
    parse_body,
)

# Create blueprint
profile_bp = Blueprint('profile', __name__, url_prefix='/api/profile')

# Section URL segment -> (create model, update model)
SECTION_MODELS = {
    "work-experiences": (WorkExperienceRequest, UpdateWorkExperienceRequest),
    "education": (EducationRequest, UpdateEducationRequest),
    "skills": (SkillRequest, UpdateSkillRequest),
    "projects": (ProjectRequest, UpdateProjectRequest),
    "certifications": (CertificationRequest, UpdateCertificationRequest),
    "achievements": (AchievementRequest, UpdateAchievementRequest),
    "references": (ReferenceRequest, UpdateReferenceRequest),
}

SECTION_CONVERTER = "any(" + ", ".join(f'"{kind}"' for kind in PROFILE_SECTIONS) + "):kind"


@profile_bp.route('', methods=['GET'])
@login_required
def get_profile():
    """Get the user's profile (null when it has not been created)"""
    config = current_app.config['CONFIG']
    return jsonify(get_profile_service(g.user_id, config))


@profile_bp.route('', methods=['POST'])
@login_required
def create_profile():
    config = current_app.config['CONFIG']
    data = parse_body(UserProfileRequest, request.get_json(silent=True))
    profile = create_profile_service(g.user_id, data.model_dump(), config)
    return jsonify(profile), 201


@profile_bp.route('', methods=['PUT'])
@login_required
def update_profile():
    config = current_app.config['CONFIG']
    data = parse_body(UpdateUserProfileRequest, request.get_json(silent=True))
    profile = update_profile_service(g.user_id, data.model_dump(exclude_unset=True), config)
    return jsonify(profile)


@profile_bp.route('/full', methods=['GET'])
@login_required
def get_full_profile():
    """Profile plus every section, each in display order"""
    config = current_app.config['CONFIG']
    return jsonify(get_resume_data(g.user_id, config))


@profile_bp.route(f'/<{SECTION_CONVERTER}>', methods=['GET'])
@login_required
def list_section(kind):
    config = current_app.config['CONFIG']
    query = ProfileQuery.model_validate(request.args.to_dict())
    entries = list_entries(
        kind, g.user_id, config,
        limit=query.limit,
        offset=query.offset,
        order_by=query.order_by,
        order=query.order,
        category=query.category,
    )
    return jsonify(entries)


@profile_bp.route(f'/<{SECTION_CONVERTER}>', methods=['POST'])
@login_required
def create_section_entry(kind):
    config = current_app.config['CONFIG']
    create_model, _ = SECTION_MODELS[kind]
    data = parse_body(create_model, request.get_json(silent=True))
    entry = create_entry(kind, g.user_id, data.model_dump(), config)
    return jsonify(entry), 201


@profile_bp.route(f'/<{SECTION_CONVERTER}>/order', methods=['PUT'])
@login_required
def reorder_section(kind):
    """Bulk update display order; ids the user does not own are ignored"""
    config = current_app.config['CONFIG']
    data = parse_body(BulkUpdateOrderRequest, request.get_json(silent=True))
    items = [item.model_dump() for item in data.items]
    updated = update_display_order(kind, g.user_id, items, config)
    return jsonify({"success": True, "updated": updated})


@profile_bp.route(f'/<{SECTION_CONVERTER}>/<int:entry_id>', methods=['GET'])
@login_required
def get_section_entry(kind, entry_id):
    config = current_app.config['CONFIG']
    return jsonify(get_entry(kind, g.user_id, entry_id, config))


@profile_bp.route(f'/<{SECTION_CONVERTER}>/<int:entry_id>', methods=['PUT'])
@login_required
def update_section_entry(kind, entry_id):
    config = current_app.config['CONFIG']
    _, update_model = SECTION_MODELS[kind]
    data = parse_body(update_model, request.get_json(silent=True))
    entry = update_entry(kind, g.user_id, entry_id, data.model_dump(exclude_unset=True), config)
    return jsonify(entry)


@profile_bp.route(f'/<{SECTION_CONVERTER}>/<int:entry_id>', methods=['DELETE'])
@login_required
def delete_section_entry(kind, entry_id):
    config = current_app.config['CONFIG']
    delete_entry(kind, g.user_id, entry_id, config)
    return jsonify({"success": True})


@profile_bp.route('/resume-import', methods=['POST'])
@login_required
def resume_import():
    """Parse an uploaded resume into profile fields without saving them"""
    config = current_app.config['CONFIG']
    upload = request.files.get('file')
    if upload is None:
        raise ResumeImportError("No resume file uploaded. Please select a file to import.")

    result = import_profile_from_resume(
        upload.read(),
        upload.mimetype,
        upload.filename,
        config,
    )
    return jsonify(result)
