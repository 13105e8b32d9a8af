"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the candidate (pseudo-legal) move sets for each piece type.
A candidate move respects how the piece moves and what stands in its way, but it might leave your own king in check.

Legality is checked later (src/engine/legality.py)
"""

from typing import Callable, Iterator, Optional, Protocol

from src.engine.castling import CASTLING_RULES, CastlingDirection
from src.engine.moves import Move, MoveKind
from src.engine.pieces import PROMOTION_OPTIONS, Color, Piece, PieceType
from src.engine.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    color_to_move: Color
    en_passant_square: Optional[Square]

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def is_any_occupied(self, squares: list[Square]) -> bool: ...
    def pieces(self, color: Color) -> Iterator[tuple[Square, Piece]]: ...
    def castling_rights_of(self, color: Color) -> list[CastlingDirection]: ...


Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

# White moves UP the board, black moves DOWN
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: BOARD_DIMENSIONS[1] - 1, Color.BLACK: 0}


def _move_onto(square: Square, target_square: Square, target: Optional[Piece]) -> Move:
    """A plain move onto an empty square, or a capture of whatever is standing there."""
    if target is None:
        return Move(square, target_square)
    return Move(square, target_square, kind=MoveKind.CAPTURE, captured=target)


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = board.piece(square).color

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            target = board.piece(target_square)
            if target is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if target.color != player_color:
                    moves.append(_move_onto(square, target_square, target))
                break

            moves.append(Move(square, target_square))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = board.piece(square).color

    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        target = board.piece(target_square)
        if target is None or target.color != player_color:
            moves.append(_move_onto(square, target_square, target))
    return moves


def pawn_attack_squares(square: Square, color: Color) -> list[Square]:
    """The two squares diagonally in front of a pawn (if on the board). Whether there is something to take does not matter here."""
    direction = PAWN_DIRECTION[color]
    return [
        target_square
        for target_square in (square.offset(-1, direction), square.offset(1, direction))
        if target_square.is_within_bounds()
    ]


def _with_promotions(move: Move, color: Color) -> list[Move]:
    """A pawn move landing on the back rank turns into one move per piece type you can promote into."""
    if move.to_square.rank != PROMOTION_RANK[color]:
        return [move]

    kind = MoveKind.PROMOTION_CAPTURE if move.is_capture else MoveKind.PROMOTION
    return [
        Move(
            move.from_square,
            move.to_square,
            kind=kind,
            promote_to=piece_type,
            captured=move.captured,
        )
        for piece_type in PROMOTION_OPTIONS
    ]


def _en_passant_move(square: Square, board: Board, pawn: Piece) -> Optional[Move]:
    """
    The en passant square is only set right after the opponent pushed a pawn by two squares.
    It is the square that pawn skipped. If it lies diagonally in front of us, take the pawn standing next to us.
    """
    en_passant_square = board.en_passant_square
    if en_passant_square is None or pawn.color != board.color_to_move:
        return None

    if en_passant_square not in pawn_attack_squares(square, pawn.color):
        return None

    captured_square = Square(en_passant_square.file, square.rank)
    captured = board.piece(captured_square)
    if captured is None or captured.type != PieceType.PAWN or captured.color == pawn.color:
        return None

    return Move(square, en_passant_square, kind=MoveKind.EN_PASSANT, captured=captured)


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in its first move, if nothing stands in the way
    - takes diagonally
    - takes en passant right after an opponent's pawn skipped past it with a double push
    - promotes when reaching the final rank
    """
    pawn = board.piece(square)
    direction = PAWN_DIRECTION[pawn.color]

    moves: list[Move] = []
    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        moves.append(Move(square, one_step))

        two_steps = one_step.offset(0, direction)
        if (
            not pawn.has_moved
            and two_steps.is_within_bounds()
            and board.is_empty(two_steps)
        ):
            moves.append(Move(square, two_steps, kind=MoveKind.DOUBLE_PAWN_PUSH))

    # pawns take diagonally:
    for target_square in pawn_attack_squares(square, pawn.color):
        target = board.piece(target_square)
        if target is not None and target.color != pawn.color:
            moves.append(_move_onto(square, target_square, target))

    en_passant = _en_passant_move(square, board, pawn)
    if en_passant is not None:
        moves.append(en_passant)

    return [
        promotion_or_move
        for move in moves
        for promotion_or_move in _with_promotions(move, pawn.color)
    ]


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see `candidate_castling_moves()`).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def candidate_moves(square: Square, board: Board) -> list[Move]:
    """Candidate moves of whichever piece stands on the square (castling excluded)."""
    piece = board.piece(square)
    if piece is None:
        return []
    return MOVEMENT_RULES[piece.type](square, board)


def pseudo_legal_moves(board: Board, color: Color) -> list[Move]:
    """Every candidate move of every piece of the given color (castling excluded)."""
    moves: list[Move] = []
    for square, piece in board.pieces(color):
        moves.extend(MOVEMENT_RULES[piece.type](square, board))
    return moves


# -- CASTLING MOVES ---
def candidate_castling_moves(board: Board, color: Color) -> list[Move]:
    """
    Castling moves that pass the rules which only depend on the pieces:

    * The right to castle in that direction has not been revoked.
    * King and rook are on their starting squares and have never moved.
    * Nothing stands in between them.

    Whether the king is in check, or passes through an attacked square, is checked by the legality filter.
    """
    moves: list[Move] = []
    for direction in board.castling_rights_of(color):
        rule = CASTLING_RULES[direction]
        king = board.piece(rule.king_from)
        rook = board.piece(rule.rook_from)
        if not _is_unmoved(king, PieceType.KING, color) or not _is_unmoved(
            rook, PieceType.ROOK, color
        ):
            continue

        if board.is_any_occupied(rule.between()):
            continue

        moves.append(
            Move(
                rule.king_from,
                rule.king_to,
                kind=MoveKind.CASTLE,
                castling_direction=direction,
            )
        )
    return moves


def _is_unmoved(piece: Optional[Piece], piece_type: PieceType, color: Color) -> bool:
    return (
        piece is not None
        and piece.type == piece_type
        and piece.color == color
        and not piece.has_moved
    )
