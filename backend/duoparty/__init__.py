from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, redis_client=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from duoparty.store import StateStore, connect
    from duoparty.services.catalog import QuestionBank
    from duoparty.socketio_events import Gateway, register_socketio_handlers

    if redis_client is None:
        redis_client = connect(flask_app.config['REDIS_URL'], flask_app.config.get('STORE_TIMEOUT_SEC', 2))
    store = StateStore(redis_client, logger=flask_app.logger)
    gateway = Gateway(
        socketio,
        store,
        QuestionBank(),
        flask_app.logger,
        grace_sec=flask_app.config.get('SESSION_CLEANUP_GRACE_SEC', 60),
        questions_per_game=flask_app.config.get('QUESTIONS_PER_GAME', 20),
        round_limit=flask_app.config.get('ROUND_LIMIT', 20),
    )
    flask_app.extensions['duoparty.store'] = store
    flask_app.extensions['duoparty.gateway'] = gateway

    # Register blueprints here
    from duoparty.main import main
    flask_app.register_blueprint(main)

    from duoparty.api.sessions import sessions
    from duoparty.api.games import games
    from duoparty.api.catalog import catalog
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')
    flask_app.register_blueprint(games, url_prefix='/api/games')
    flask_app.register_blueprint(catalog, url_prefix='/api')

    register_socketio_handlers(gateway)

    from duoparty.errors import StoreUnavailable

    @flask_app.errorhandler(StoreUnavailable)
    def store_unavailable(exc):
        return jsonify({'error': 'store_unavailable'}), 503

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from duoparty.seed import seed_catalog
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            modes, questions = seed_catalog()
            print(f'Database has been reset and seeded! ({modes} modes, {questions} questions)')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
