"""
Resume generation routes blueprint.
"""
from flask import Blueprint, Response, g, jsonify, request, current_app

from services.profile_service import get_resume_data
from services.resume_generation_service import (
    generate_resume_html,
    generate_resume_pdf,
    validate_resume_generation,
)
from utils.auth_utils import login_required
from utils.errors import ValidationFailed
from utils.text_utils import sanitize_filename
from utils.validators import GenerateResumeRequest, parse_body

# Create blueprint
resume_generation_bp = Blueprint('resume_generation', __name__, url_prefix='/api/resume-generation')


@resume_generation_bp.route('', methods=['GET'])
@login_required
def get_generation_data():
    """All profile content available to a generated resume"""
    config = current_app.config['CONFIG']
    return jsonify(get_resume_data(g.user_id, config))


@resume_generation_bp.route('', methods=['POST'])
@login_required
def validate_generation():
    config = current_app.config['CONFIG']
    data = parse_body(GenerateResumeRequest, request.get_json(silent=True))
    return jsonify(validate_resume_generation(g.user_id, data, config))


@resume_generation_bp.route('/html', methods=['POST'])
@login_required
def generate_html():
    config = current_app.config['CONFIG']
    data = parse_body(GenerateResumeRequest, request.get_json(silent=True))
    html = generate_resume_html(g.user_id, data, config)
    return Response(html, mimetype='text/html')


@resume_generation_bp.route('/preview', methods=['POST'])
@login_required
def generate_preview():
    """HTML with the on-screen preview styles"""
    config = current_app.config['CONFIG']
    data = parse_body(GenerateResumeRequest, request.get_json(silent=True))
    html = generate_resume_html(g.user_id, data, config, preview=True)
    return Response(html, mimetype='text/html')


@resume_generation_bp.route('/pdf', methods=['POST'])
@login_required
def generate_pdf():
    config = current_app.config['CONFIG']
    data = parse_body(GenerateResumeRequest, request.get_json(silent=True))

    validation = validate_resume_generation(g.user_id, data, config)
    if not validation["valid"]:
        raise ValidationFailed("Resume validation failed", details=validation["errors"])

    pdf = generate_resume_pdf(g.user_id, data, config)
    return Response(
        pdf,
        mimetype='application/pdf',
        headers={
            'Content-Disposition': f'attachment; filename="{sanitize_filename(data.title)}.pdf"',
            'Content-Length': str(len(pdf)),
        }
    )
