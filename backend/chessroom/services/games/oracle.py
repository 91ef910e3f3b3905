"""Rules oracle: the coordinator's only window onto chess rules.

Wraps a python-chess ``Board``. Moves arrive as client payloads
(``{'from': 'e2', 'to': 'e4', 'promotion': 'q'}``) and come back as
``MoveResult``; malformed or illegal input is a failed result, never an
exception.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

import chess

from chessroom.models import BLACK, WHITE

_PROMOTION_PIECES = {'n': chess.KNIGHT, 'b': chess.BISHOP, 'r': chess.ROOK, 'q': chess.QUEEN}


@dataclass(frozen=True)
class MoveResult:
    success: bool
    fen: str
    move: Optional[dict] = None


class RulesOracle(Protocol):
    def turn(self) -> str: ...

    def fen(self) -> str: ...

    def apply(self, move: Any) -> MoveResult: ...

    def is_checkmate(self) -> bool: ...

    def is_draw(self) -> bool: ...

    def is_terminal(self) -> bool: ...


class ChessOracle:
    def __init__(self, fen: str = chess.STARTING_FEN):
        self._board = chess.Board(fen)

    def turn(self) -> str:
        return WHITE if self._board.turn == chess.WHITE else BLACK

    def fen(self) -> str:
        return self._board.fen()

    def apply(self, move: Any) -> MoveResult:
        try:
            parsed = self._parse(move)
        except (ValueError, KeyError, TypeError, AttributeError):
            return MoveResult(False, self.fen())
        if parsed not in self._board.legal_moves:
            return MoveResult(False, self.fen())
        applied = self._describe(parsed)
        self._board.push(parsed)
        return MoveResult(True, self.fen(), applied)

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def is_draw(self) -> bool:
        board = self._board
        return (
            board.is_stalemate()
            or board.is_insufficient_material()
            or board.is_fifty_moves()
            or board.is_repetition(3)
        )

    def is_terminal(self) -> bool:
        return self.is_checkmate() or self.is_draw()

    def _parse(self, move: dict) -> chess.Move:
        from_square = chess.parse_square(str(move['from']).lower())
        to_square = chess.parse_square(str(move['to']).lower())
        promotion = None
        piece = self._board.piece_at(from_square)
        if piece and piece.piece_type == chess.PAWN and chess.square_rank(to_square) in (0, 7):
            requested = str(move.get('promotion') or 'q').lower()
            promotion = _PROMOTION_PIECES.get(requested, chess.QUEEN)
        return chess.Move(from_square, to_square, promotion=promotion)

    def _describe(self, move: chess.Move) -> dict:
        board = self._board
        piece = board.piece_at(move.from_square)
        flags = ''
        captured = None
        if board.is_en_passant(move):
            captured = 'p'
            flags += 'e'
        elif board.is_capture(move):
            captured = board.piece_at(move.to_square).symbol().lower()
            flags += 'c'
        if board.is_kingside_castling(move):
            flags += 'k'
        elif board.is_queenside_castling(move):
            flags += 'q'
        if move.promotion:
            flags += 'p'
        applied = {
            'color': WHITE if piece.color == chess.WHITE else BLACK,
            'piece': piece.symbol().lower(),
            'from': chess.square_name(move.from_square),
            'to': chess.square_name(move.to_square),
            'san': board.san(move),
            'flags': flags or 'n',
        }
        if captured:
            applied['captured'] = captured
        if move.promotion:
            applied['promotion'] = chess.piece_symbol(move.promotion)
        return applied
