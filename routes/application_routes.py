"""
Application tracker routes blueprint, including the tailored resume of each application.
"""
from flask import Blueprint, Response, g, jsonify, request, current_app

from services.application_service import (
    get_all_applications,
    get_application as get_application_service,
    create_application as create_application_service,
    update_application as update_application_service,
    delete_application as delete_application_service,
    get_status_history,
    export_applications_csv
)
from services.resume_generation_service import (
    generate_job_application_resume_html,
    generate_job_application_resume_pdf,
)
from services.resume_service import get_tailored_resume_by_application, save_tailored_resume
from utils.auth_utils import login_required
from utils.errors import ValidationFailed
from utils.text_utils import sanitize_filename
from utils.validators import (
    ApplicationRequest,
    ApplicationsQuery,
    JobApplicationResumeRequest,
    SaveTailoredResumeRequest,
    UpdateApplicationRequest,
    parse_body,
)

# Create blueprint
application_bp = Blueprint('application', __name__, url_prefix='/api/applications')


def _application_summary(application):
    return {
        "id": application["id"],
        "company": application["company"],
        "position": application["position"],
    }


@application_bp.route('', methods=['GET'])
@login_required
def get_applications():
    """Get the user's applications, newest first"""
    config = current_app.config['CONFIG']
    query = ApplicationsQuery.model_validate(request.args.to_dict())
    applications = get_all_applications(
        g.user_id, config,
        status=query.status,
        company=query.company,
        limit=query.limit,
        offset=query.offset,
    )
    return jsonify(applications)


@application_bp.route('', methods=['POST'])
@login_required
def create_application():
    """Create a new application"""
    config = current_app.config['CONFIG']
    data = parse_body(ApplicationRequest, request.get_json(silent=True))
    application = create_application_service(g.user_id, data.model_dump(), config)
    return jsonify(application), 201


@application_bp.route('/export', methods=['GET'])
@login_required
def export_applications():
    """Export applications to CSV"""
    config = current_app.config['CONFIG']
    return export_applications_csv(g.user_id, config)


@application_bp.route('/<app_id>', methods=['GET'])
@login_required
def get_application(app_id):
    config = current_app.config['CONFIG']
    return jsonify(get_application_service(app_id, g.user_id, config))


@application_bp.route('/<app_id>', methods=['PUT'])
@login_required
def update_application(app_id):
    """Update an application; a status change is added to its history"""
    config = current_app.config['CONFIG']
    data = parse_body(UpdateApplicationRequest, request.get_json(silent=True))
    application = update_application_service(app_id, g.user_id, data.model_dump(exclude_unset=True), config)
    return jsonify(application)


@application_bp.route('/<app_id>', methods=['DELETE'])
@login_required
def delete_application(app_id):
    config = current_app.config['CONFIG']
    delete_application_service(app_id, g.user_id, config)
    return jsonify({"success": True})


@application_bp.route('/<app_id>/statuses', methods=['GET'])
@login_required
def get_application_statuses(app_id):
    config = current_app.config['CONFIG']
    return jsonify(get_status_history(app_id, g.user_id, config))


@application_bp.route('/<app_id>/resume', methods=['GET'])
@login_required
def get_application_resume(app_id):
    """Application details for resume generation and its saved tailored resume"""
    config = current_app.config['CONFIG']
    application = get_application_service(app_id, g.user_id, config)
    tailored = get_tailored_resume_by_application(app_id, g.user_id, config)

    return jsonify({
        **_application_summary(application),
        "jobDescription": application["jobDescription"],
        "hasJobDescription": bool(application["jobDescription"]),
        "location": application["location"],
        "status": application["status"],
        "tailoredResume": {
            "id": tailored["id"],
            "title": tailored["title"],
            "updatedAt": tailored["updatedAt"],
        } if tailored else None,
    })


@application_bp.route('/<app_id>/resume', methods=['POST'])
@login_required
def generate_application_resume(app_id):
    """Generate a resume tailored to the application as HTML, preview HTML or PDF"""
    config = current_app.config['CONFIG']
    payload = dict(request.get_json(silent=True) or {})
    payload['applicationId'] = app_id
    resume_request = parse_body(JobApplicationResumeRequest, payload)

    application = get_application_service(app_id, g.user_id, config)
    if resume_request.use_ai_selection and not application["jobDescription"]:
        raise ValidationFailed("Job description is required for AI-powered resume generation")

    output_format = request.args.get('format', 'html')

    if output_format == 'pdf':
        pdf, _ = generate_job_application_resume_pdf(g.user_id, application, resume_request, config)
        filename = f"{sanitize_filename(resume_request.title)}_{sanitize_filename(application['company'])}.pdf"
        return Response(
            pdf,
            mimetype='application/pdf',
            headers={'Content-Disposition': f'attachment; filename="{filename}"'}
        )

    html, ai_selection = generate_job_application_resume_html(
        g.user_id, application, resume_request, config, preview=output_format == 'preview')
    return jsonify({
        "html": html,
        "aiSelection": ai_selection,
        "application": _application_summary(application),
    })


@application_bp.route('/<app_id>/resume', methods=['PUT'])
@login_required
def save_application_resume(app_id):
    """Create or update the tailored resume linked to the application"""
    config = current_app.config['CONFIG']
    data = parse_body(SaveTailoredResumeRequest, request.get_json(silent=True))
    get_application_service(app_id, g.user_id, config)

    resume, is_new = save_tailored_resume(app_id, g.user_id, data.title, data.content, config)
    return jsonify({
        "success": True,
        "resume": {
            "id": resume["id"],
            "title": resume["title"],
            "isTailored": resume["isTailored"],
            "jobApplicationId": resume["jobApplicationId"],
            "updatedAt": resume["updatedAt"],
        },
        "isNew": is_new,
    })
