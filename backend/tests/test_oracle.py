import chess

from chessroom.services.games.oracle import ChessOracle


def test_initial_position_white_to_move():
    oracle = ChessOracle()
    assert oracle.turn() == 'w'
    assert oracle.fen() == chess.STARTING_FEN
    assert not oracle.is_terminal()


def test_apply_legal_move_updates_position():
    oracle = ChessOracle()
    result = oracle.apply({'from': 'e2', 'to': 'e4'})
    assert result.success
    assert result.fen.startswith('rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b')
    assert result.move['san'] == 'e4'
    assert result.move['color'] == 'w'
    assert result.move['piece'] == 'p'
    assert 'captured' not in result.move
    assert oracle.turn() == 'b'


def test_illegal_move_leaves_position_untouched():
    oracle = ChessOracle()
    result = oracle.apply({'from': 'e7', 'to': 'e4'})
    assert not result.success
    assert result.move is None
    assert oracle.fen() == chess.STARTING_FEN


def test_malformed_payloads_are_rejected():
    oracle = ChessOracle()
    for bad in (None, 'e2e4', {'from': 'z9', 'to': 'e4'}, {'to': 'e4'}, {'from': 'e2'}, ['e2', 'e4']):
        assert not oracle.apply(bad).success
    assert oracle.turn() == 'w'


def test_capture_is_reported():
    oracle = ChessOracle()
    for move in ({'from': 'e2', 'to': 'e4'}, {'from': 'd7', 'to': 'd5'}):
        assert oracle.apply(move).success
    result = oracle.apply({'from': 'e4', 'to': 'd5'})
    assert result.success
    assert result.move['captured'] == 'p'
    assert result.move['san'] == 'exd5'


def test_promotion_defaults_to_queen():
    oracle = ChessOracle('8/P6k/8/8/8/8/8/K7 w - - 0 1')
    result = oracle.apply({'from': 'a7', 'to': 'a8'})
    assert result.success
    assert result.move['promotion'] == 'q'
    assert oracle.fen().startswith('Q7/')


def test_promotion_honours_requested_piece():
    oracle = ChessOracle('8/P6k/8/8/8/8/8/K7 w - - 0 1')
    result = oracle.apply({'from': 'a7', 'to': 'a8', 'promotion': 'n'})
    assert result.success
    assert result.move['promotion'] == 'n'
    assert oracle.fen().startswith('N7/')


def test_checkmate_detected():
    oracle = ChessOracle()
    for move in (
        {'from': 'f2', 'to': 'f3'},
        {'from': 'e7', 'to': 'e5'},
        {'from': 'g2', 'to': 'g4'},
        {'from': 'd8', 'to': 'h4'},
    ):
        assert oracle.apply(move).success
    assert oracle.is_checkmate()
    assert oracle.is_terminal()
    assert not oracle.is_draw()


def test_stalemate_is_a_draw():
    oracle = ChessOracle('k7/8/1Q6/8/8/8/8/7K w - - 0 1')
    assert oracle.apply({'from': 'b6', 'to': 'c7'}).success
    assert oracle.is_draw()
    assert not oracle.is_checkmate()


def test_threefold_repetition_is_a_draw():
    oracle = ChessOracle()
    shuffle = [('g1', 'f3'), ('g8', 'f6'), ('f3', 'g1'), ('f6', 'g8')]
    for frm, to in shuffle:
        assert oracle.apply({'from': frm, 'to': to}).success
    assert not oracle.is_draw()
    for frm, to in shuffle:
        assert oracle.apply({'from': frm, 'to': to}).success
    assert oracle.fen() == chess.STARTING_FEN.replace(' 0 1', ' 8 5')
    assert oracle.is_draw()
    assert oracle.is_terminal()


def test_bare_kings_are_a_draw():
    oracle = ChessOracle('k7/8/8/8/8/8/1p6/K7 w - - 0 1')
    assert not oracle.is_draw()
    result = oracle.apply({'from': 'a1', 'to': 'b2'})
    assert result.success
    assert result.move['captured'] == 'p'
    assert oracle.is_draw()
    assert not oracle.is_checkmate()
