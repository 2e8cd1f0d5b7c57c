from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _allowed_origins(config):
    origins = config.get('CORS_ORIGINS') or ['*']
    return '*' if '*' in origins else origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    origins = _allowed_origins(flask_app.config)
    CORS(flask_app, origins=origins, expose_headers=['X-RateLimit-Limit', 'X-RateLimit-Remaining', 'X-RateLimit-Reset'])

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from arcade.errors import register_error_handlers
    register_error_handlers(flask_app)

    from arcade.middleware import init_middleware
    init_middleware(flask_app)

    # Import and register blueprints here
    from arcade.main import main
    flask_app.register_blueprint(main)

    from arcade.api.teams import teams
    from arcade.api.quiz import quiz
    from arcade.api.mine_game import mine_game
    from arcade.api.admin import admin
    # Mount game routes under /api to match the frontend API client
    flask_app.register_blueprint(teams, url_prefix='/api/teams')
    flask_app.register_blueprint(quiz, url_prefix='/api/quiz')
    flask_app.register_blueprint(mine_game, url_prefix='/api/mine-game')
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    # Register Socket.IO event handlers
    from arcade.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from arcade.services.question_bank import seed_all_default_questions
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            seeded = seed_all_default_questions()
            print(f'Database has been reset and seeded with {seeded} questions!')

    @click.command('seed-questions')
    def seed_questions_command():
        """Seeds the default question bank for any empty difficulty."""
        from arcade.services.question_bank import seed_all_default_questions
        with flask_app.app_context():
            seeded = seed_all_default_questions()
            print(f'Seeded {seeded} questions.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_questions_command)

    return flask_app
