"""Korean Janggi rules engine and search."""

from .geometry import Side, Position
from .board import Board, Formation, Move, MoveRecord, Piece, PieceType
from .rules import (
    is_attacked, is_in_check, legal_moves, all_legal_moves,
    has_legal_moves, is_checkmate, check_bikjang, count_material,
)
from .game import JanggiGame, GameResult, GameOverReason, GameSnapshot, GameStatus
from .evaluate import evaluate
from .engine import Engine, SearchResult, find_best_move
from .worker import SearchRequest, SearchWorker
from .config import Difficulty, GameConfig, GameMode, Settings

__all__ = [
    # Board and game
    'Side', 'Position',
    'Board', 'Formation', 'Move', 'MoveRecord', 'Piece', 'PieceType',
    'JanggiGame', 'GameResult', 'GameOverReason', 'GameSnapshot', 'GameStatus',
    # Rules
    'is_attacked', 'is_in_check', 'legal_moves', 'all_legal_moves',
    'has_legal_moves', 'is_checkmate', 'check_bikjang', 'count_material',
    # Search
    'evaluate', 'Engine', 'SearchResult', 'find_best_move',
    'SearchRequest', 'SearchWorker',
    # Configuration
    'Difficulty', 'GameConfig', 'GameMode', 'Settings',
]
