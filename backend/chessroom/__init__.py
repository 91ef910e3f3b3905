from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from chessroom.config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from chessroom.services.games import BackgroundScheduler, GameCoordinator, ManualScheduler
    from chessroom.socketio_events import SocketIOTransport, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    # Tests drive the clock by hand unless explicitly asked not to
    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        scheduler = ManualScheduler()
    else:
        scheduler = BackgroundScheduler(socketio, logger=flask_app.logger)

    coordinator = GameCoordinator(
        transport=SocketIOTransport(socketio, namespace),
        scheduler=scheduler,
        allowance=int(flask_app.config.get('MOVE_ALLOWANCE_SEC', 30)),
        tick_interval=float(flask_app.config.get('CLOCK_TICK_SEC', 1)),
        max_games=int(flask_app.config.get('MAX_ACTIVE_GAMES', 0)),
        logger=flask_app.logger,
    )
    flask_app.extensions['chessroom'] = coordinator
    register_socketio_handlers(coordinator, namespace=namespace)

    from chessroom.main import main
    flask_app.register_blueprint(main)

    from chessroom.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    return flask_app
