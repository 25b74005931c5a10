"""
LinkedIn conversation starter routes blueprint.
"""
from flask import Blueprint, g, jsonify, request, current_app

from services.conversation_starter_service import generate_conversation_starter
from utils.auth_utils import login_required
from utils.validators import GenerateConversationStarterRequest, parse_body

# Create blueprint
conversation_starter_bp = Blueprint('conversation_starter', __name__, url_prefix='/api/conversation-starters')


@conversation_starter_bp.route('/generate', methods=['POST'])
@login_required
def generate():
    """Draft a short LinkedIn message for the described prospect"""
    config = current_app.config['CONFIG']
    data = parse_body(GenerateConversationStarterRequest, request.get_json(silent=True))
    return jsonify(generate_conversation_starter(g.user_id, data, config))
