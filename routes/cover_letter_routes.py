"""
Cover letter routes blueprint.
"""
from flask import Blueprint, Response, g, jsonify, request, current_app

from services.cover_letter_service import (
    create_cover_letter as create_cover_letter_service,
    delete_cover_letter as delete_cover_letter_service,
    generate_cover_letter as generate_cover_letter_service,
    get_cover_letter as get_cover_letter_service,
    get_cover_letters,
    update_cover_letter as update_cover_letter_service,
)
from utils.auth_utils import login_required
from utils.docx_utils import build_cover_letter_docx
from utils.pdf_utils import build_cover_letter_pdf
from utils.text_utils import sanitize_filename
from utils.validators import (
    CoverLetterRequest,
    CoverLettersQuery,
    GenerateCoverLetterRequest,
    UpdateCoverLetterRequest,
    parse_body,
)

# Create blueprint
cover_letter_bp = Blueprint('cover_letter', __name__, url_prefix='/api/cover-letters')

DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'


def _attachment(data, mimetype, filename):
    return Response(
        data,
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


@cover_letter_bp.route('', methods=['GET'])
@login_required
def list_cover_letters():
    """Get the user's cover letters, newest first"""
    config = current_app.config['CONFIG']
    query = CoverLettersQuery.model_validate(request.args.to_dict())
    letters = get_cover_letters(
        g.user_id, config,
        is_ai_generated=query.is_ai_generated,
        job_application_id=query.job_application_id,
        resume_id=query.resume_id,
        limit=query.limit,
        offset=query.offset,
    )
    return jsonify(letters)


@cover_letter_bp.route('', methods=['POST'])
@login_required
def create_cover_letter():
    config = current_app.config['CONFIG']
    data = parse_body(CoverLetterRequest, request.get_json(silent=True))
    letter = create_cover_letter_service(g.user_id, data.model_dump(), config)
    return jsonify(letter), 201


@cover_letter_bp.route('/generate', methods=['POST'])
@login_required
def generate_cover_letter():
    """Generate a cover letter with AI; nothing is saved"""
    config = current_app.config['CONFIG']
    data = parse_body(GenerateCoverLetterRequest, request.get_json(silent=True))
    return jsonify(generate_cover_letter_service(data, config))


@cover_letter_bp.route('/<letter_id>', methods=['GET'])
@login_required
def get_cover_letter(letter_id):
    config = current_app.config['CONFIG']
    return jsonify(get_cover_letter_service(letter_id, g.user_id, config))


@cover_letter_bp.route('/<letter_id>', methods=['PUT'])
@login_required
def update_cover_letter(letter_id):
    config = current_app.config['CONFIG']
    data = parse_body(UpdateCoverLetterRequest, request.get_json(silent=True))
    letter = update_cover_letter_service(letter_id, g.user_id, data.model_dump(exclude_unset=True), config)
    return jsonify(letter)


@cover_letter_bp.route('/<letter_id>', methods=['DELETE'])
@login_required
def delete_cover_letter(letter_id):
    config = current_app.config['CONFIG']
    delete_cover_letter_service(letter_id, g.user_id, config)
    return jsonify({"success": True})


@cover_letter_bp.route('/<letter_id>/pdf', methods=['GET'])
@login_required
def export_cover_letter_pdf(letter_id):
    config = current_app.config['CONFIG']
    letter = get_cover_letter_service(letter_id, g.user_id, config)
    pdf = build_cover_letter_pdf(letter["content"], letter["title"])
    return _attachment(pdf, 'application/pdf', f"{sanitize_filename(letter['title'])}.pdf")


@cover_letter_bp.route('/<letter_id>/docx', methods=['GET'])
@login_required
def export_cover_letter_docx(letter_id):
    config = current_app.config['CONFIG']
    letter = get_cover_letter_service(letter_id, g.user_id, config)
    docx = build_cover_letter_docx(letter["content"])
    return _attachment(docx, DOCX_MIMETYPE, f"{sanitize_filename(letter['title'])}.docx")
