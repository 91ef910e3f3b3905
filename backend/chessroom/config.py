import os

_DEFAULT_ORIGINS = 'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000'


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Per-move allowance (seconds) granted to the side about to move
    MOVE_ALLOWANCE_SEC = int(os.environ.get('MOVE_ALLOWANCE_SEC', '30'))
    # Clock tick interval (seconds)
    CLOCK_TICK_SEC = float(os.environ.get('CLOCK_TICK_SEC', '1'))
    # Concurrent games before new arrivals are seated as spectators. 0 disables.
    MAX_ACTIVE_GAMES = int(os.environ.get('MAX_ACTIVE_GAMES', '0'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', _DEFAULT_ORIGINS).split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
