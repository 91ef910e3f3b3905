"""Game domain services: matchmaking, move routing and clocks.

This package contains pure(ish) domain logic driven by the socket
handlers, keeping transport concerns separated from core game mechanics.
"""

from .clock import BackgroundScheduler, Clock, ManualScheduler
from .commands import parse_command
from .coordinator import GameCoordinator
from .oracle import ChessOracle, MoveResult
from .outbox import Emission
