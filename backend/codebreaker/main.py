from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Codebreaker game server!'})


@main.route('/api/users', methods=['GET'])
def list_users():
    presence = current_app.extensions['codebreaker'].presence
    return jsonify([p.to_dict() for p in presence.snapshot()])


@main.route('/api/games/<string:game_id>', methods=['GET'])
def get_game_state(game_id):
    session = current_app.extensions['codebreaker'].store.find(game_id)
    if session is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(session.summary())
