from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

SAMPLE_QUIZ = {
    'title': 'General Knowledge',
    'questions': [
        {
            'text': 'What is the capital of France?',
            'options': ['Berlin', 'Madrid', 'Paris', 'Rome'],
            'correct_option_index': 2,
            'time_limit': 20,
        },
        {
            'text': 'Which planet is known as the Red Planet?',
            'options': ['Venus', 'Mars', 'Jupiter', 'Mercury'],
            'correct_option_index': 1,
            'time_limit': 15,
        },
    ],
}

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from livequiz.services.sessions import SessionController, SocketIOOutbound
    from livequiz.services.store import QuizStore, ResultArchive

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    timers_enabled = not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_TIMERS_IN_TESTS')
    controller = SessionController(
        outbound=SocketIOOutbound(namespace=namespace),
        quiz_store=QuizStore(),
        archive=ResultArchive(),
        # Without a spawner timers are armed but only advance when ticked directly
        spawn=socketio.start_background_task if timers_enabled else None,
        sleep=socketio.sleep,
        points_per_correct=int(flask_app.config.get('POINTS_PER_CORRECT', 100)),
        tick_interval=float(flask_app.config.get('TICK_INTERVAL_SEC', 1)),
    )
    controller.init_app(flask_app)

    # Import and register blueprints here
    from livequiz.main import main
    flask_app.register_blueprint(main)

    from livequiz.api.quizzes import quizzes
    flask_app.register_blueprint(quizzes, url_prefix='/api/quizzes')

    from livequiz.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database with a sample quiz."""
        from livequiz.services.store import QuizStore
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            quiz = QuizStore().create(SAMPLE_QUIZ)
            print(f"Database has been reset and seeded with quiz {quiz['id']}!")

    flask_app.cli.add_command(db_reset_command)

    return flask_app
