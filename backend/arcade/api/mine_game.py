from flask import Blueprint

from arcade.errors import success
from arcade.schemas import CompleteMineGamePayload, MineGameActionPayload, StartMineGamePayload, load_json
from arcade.services import mine_game as mine_service

mine_game = Blueprint('mine_game', __name__)


@mine_game.route('/start', methods=['POST'])
def start():
    payload = load_json(StartMineGamePayload)
    data = mine_service.start_mine_game(payload.session_id, payload.difficulty)
    return success(data, data['message'])


@mine_game.route('/action', methods=['POST'])
def action():
    payload = load_json(MineGameActionPayload)
    data = mine_service.record_action(payload)
    return success(data, data['message'])


@mine_game.route('/complete', methods=['POST'])
def complete():
    payload = load_json(CompleteMineGamePayload)
    data = mine_service.complete_mine_game(payload.session_id, payload.final_mine_score, payload.final_pro_score)
    return success(data, data['message'])
