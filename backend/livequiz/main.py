from flask import Blueprint, jsonify

from livequiz.services.sessions.controller import get_controller

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the live quiz server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'live_sessions': len(get_controller().registry)})
