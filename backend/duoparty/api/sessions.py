from flask import Blueprint, jsonify, request

from duoparty.api import get_gateway
from duoparty.errors import SessionNotFound, ValidationError

sessions = Blueprint('sessions', __name__)


@sessions.route('/new', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    try:
        session = get_gateway().sessions.create(data.get('name'), data.get('type'), data.get('password'))
    except ValidationError as exc:
        return jsonify({'error': exc.message}), 400
    return jsonify({'id': session.room, 'code': session.code}), 201


@sessions.route('/<string:room_id>', methods=['GET'])
def get_session(room_id):
    try:
        session = get_gateway().sessions.get(room_id)
    except SessionNotFound:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify(session.to_dict())
