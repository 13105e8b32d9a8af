"""Small helpers shared by the test modules (keeps the tests readable)"""

from src.engine.board import Board
from src.engine.castling import castling_from_fen
from src.engine.fen import parse_placement
from src.engine.moves import Move
from src.engine.pieces import Color
from src.engine.square import Square


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def uci_set(moves: list[Move]) -> set[str]:
    return {move.to_uci() for move in moves}


def board_with(
    pieces: dict[str, str],
    to_move: str = "w",
    castling: str = "-",
    en_passant: str = "-",
) -> Board:
    """
    Board with only the given pieces: {square name: FEN character}.
    Pieces get the move count a FEN import would give them on that square.
    Built directly (not from a FEN string), so boards without kings are possible.
    """
    board = Board(
        position={},
        color_to_move=Color.WHITE if to_move == "w" else Color.BLACK,
        castling_rights=castling_from_fen(castling),
        en_passant_square=sq(en_passant) if en_passant != "-" else None,
    )
    for square_name, fen_char in pieces.items():
        square = sq(square_name)
        board.place_piece(_parsed_piece(fen_char, square), square)
    return board


def _parsed_piece(fen_char: str, square: Square):
    rank_fens = ["8"] * 8
    left = str(square.file) if square.file > 0 else ""
    right = str(7 - square.file) if square.file < 7 else ""
    rank_fens[7 - square.rank] = f"{left}{fen_char}{right}"
    return parse_placement("/".join(rank_fens))[square]
