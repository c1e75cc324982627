from flask import Blueprint, jsonify

from duoparty.api import get_gateway

catalog = Blueprint('catalog', __name__)


@catalog.route('/gamemodes', methods=['GET'])
def list_game_modes():
    return jsonify(get_gateway().question_bank.list_game_modes())


@catalog.route('/questions/count', methods=['GET'])
def question_count():
    return jsonify({'totalQuestions': get_gateway().question_bank.count()})
