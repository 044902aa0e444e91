from flask import Blueprint, current_app, jsonify, request

from livequiz.errors import PersistenceFailure
from livequiz.services.store import QuizStore, ResultArchive

quizzes = Blueprint('quizzes', __name__)

quiz_store = QuizStore()
result_archive = ResultArchive()


def _validate_quiz(data):
    """Return an error message for an invalid quiz body, or None."""
    if not isinstance(data, dict):
        return 'JSON body is required'
    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        return 'Quiz title is required'
    questions = data.get('questions') or []
    if not isinstance(questions, list):
        return 'questions must be a list'
    for pos, q in enumerate(questions, start=1):
        if not isinstance(q, dict) or not str(q.get('text') or '').strip():
            return f'Question {pos}: text is required'
        options = q.get('options')
        if not isinstance(options, list) or len(options) < 2:
            return f'Question {pos}: at least two options are required'
        if any(not isinstance(o, str) or not o.strip() for o in options):
            return f'Question {pos}: options must be non-empty strings'
        idx = q.get('correct_option_index')
        if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < len(options):
            return f'Question {pos}: correct_option_index is out of range'
        limit = q.get('time_limit')
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0):
            return f'Question {pos}: time_limit must be a positive integer'
    return None


@quizzes.route('', methods=['POST'])
def create_quiz():
    data = request.get_json(silent=True)
    error = _validate_quiz(data)
    if error:
        return jsonify({'error': error}), 400
    try:
        quiz = quiz_store.create(data, default_time_limit=current_app.config.get('DEFAULT_TIME_LIMIT_SEC', 20))
    except PersistenceFailure as exc:
        current_app.logger.error(f"[quiz-create-failed] {exc}")
        return jsonify({'error': 'Quiz could not be saved'}), 500
    return jsonify(quiz), 201


@quizzes.route('', methods=['GET'])
def list_quizzes():
    try:
        return jsonify(quiz_store.list())
    except PersistenceFailure as exc:
        current_app.logger.error(f"[quiz-list-failed] {exc}")
        return jsonify({'error': 'Quizzes could not be loaded'}), 500


@quizzes.route('/<int:quiz_id>', methods=['GET'])
def get_quiz(quiz_id):
    try:
        quiz = quiz_store.get_by_id(quiz_id)
    except PersistenceFailure as exc:
        current_app.logger.error(f"[quiz-get-failed] id={quiz_id} {exc}")
        return jsonify({'error': 'Quiz could not be loaded'}), 500
    if quiz is None:
        return jsonify({'error': 'Quiz not found'}), 404
    return jsonify(quiz)


@quizzes.route('/<int:quiz_id>/results', methods=['GET'])
def get_quiz_results(quiz_id):
    try:
        if quiz_store.get_by_id(quiz_id) is None:
            return jsonify({'error': 'Quiz not found'}), 404
        return jsonify(result_archive.list_for_quiz(quiz_id))
    except PersistenceFailure as exc:
        current_app.logger.error(f"[results-get-failed] id={quiz_id} {exc}")
        return jsonify({'error': 'Results could not be loaded'}), 500
