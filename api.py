"""FastAPI backend for Janggi game."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from time import time

from janggi.board import Board, Formation, Piece, SIDE_NAMES
from janggi.config import Difficulty, GameConfig, GameMode, Settings
from janggi.game import JanggiGame
from janggi.geometry import Position, Side
from janggi.rules import count_material
from janggi.worker import SearchRequest, SearchWorker

logger = logging.getLogger(__name__)

settings = Settings.from_env()

# Thread pool for CPU-intensive AI operations, shared by every game's worker
executor = ThreadPoolExecutor(
    max_workers=settings.search_workers, thread_name_prefix="janggi-search"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    yield
    # Cleanup: drop pending searches and shut down the thread pool
    for state in games.values():
        state.worker.cancel()
    executor.shutdown(wait=True)


app = FastAPI(title="Janggi AI Engine", lifespan=lifespan)


class GameState:
    """Thread-safe game state container."""

    def __init__(self, game: JanggiGame, config: GameConfig, depth: int):
        self.game = game
        self.config = config
        self.depth = depth
        self.lock = asyncio.Lock()
        self.last_access = time()
        self.worker = SearchWorker(executor=executor)


# Global game state with proper locking
games: Dict[str, GameState] = {}
games_lock = asyncio.Lock()

MAX_IDLE_TIME = 3600


async def get_game_state(game_id: str) -> GameState:
    """Get game state with proper error handling."""
    async with games_lock:
        if game_id not in games:
            raise HTTPException(status_code=404, detail="Game not found")
        game_state = games[game_id]
        game_state.last_access = time()
        return game_state


async def cleanup_old_games():
    """Clean up games that haven't been accessed for a long time."""
    current_time = time()

    async with games_lock:
        to_remove = [
            game_id
            for game_id, state in games.items()
            if current_time - state.last_access > MAX_IDLE_TIME
        ]
        for game_id in to_remove:
            games[game_id].worker.cancel()
            del games[game_id]
    if to_remove:
        logger.info("Removed %d idle games", len(to_remove))


class MoveRequest(BaseModel):
    """Request model for making a move."""

    game_id: str
    from_square: str  # e.g., "a1"
    to_square: str  # e.g., "a2"


class NewGameRequest(BaseModel):
    """Request model for creating a new game."""

    game_id: str
    mode: str = "ai"  # "ai" or "local"
    difficulty: Optional[str] = None  # "easy", "medium", "hard"; server default if None
    depth: Optional[int] = None  # Overrides the difficulty's depth
    player_side: str = "CHO"  # Human side in ai mode
    cho_formation: Optional[str] = None  # "마상상마", "상마마상", "상마상마", "마상마상"
    han_formation: Optional[str] = None
    custom_setup: Optional[Dict[str, str]] = None  # e.g., {"e2": "hK", "e9": "cK"}
    turn: str = "CHO"  # Side to move first


class BoardResponse(BaseModel):
    """Response model for board state."""

    board: List[List[Optional[str]]]
    board_korean: List[List[Optional[Dict[str, str]]]]
    setup: Dict[str, str]
    side_to_move: str
    game_over: bool
    winner: Optional[str]
    reason: Optional[str] = None  # "checkmate", "resign" or "bikjang"
    in_check: bool
    is_bikjang: bool
    legal_moves: List[Dict[str, str]]
    move_history: List[Dict[str, Any]]
    captured: Dict[str, List[str]]
    material: Dict[str, int]
    last_move: Optional[Dict[str, str]] = None
    can_undo: bool = False
    mode: str
    engine_side: Optional[str] = None


def square_to_position(square: str) -> Position:
    """Parse square notation, mapping malformed input to a 400."""
    try:
        return Position.from_square(square)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid square notation: {e}")


def parse_side(value: str) -> Side:
    try:
        return Side(value.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown side: {value!r}")


def piece_to_korean_dict(piece: Optional[Piece]) -> Optional[Dict[str, str]]:
    """Convert piece to Korean name and color info."""
    if piece is None:
        return None
    side_name = SIDE_NAMES[piece.side]
    color = "red" if piece.side == Side.HAN else "blue"
    return {
        "name": piece.korean_name,
        "side": side_name,
        "color": color,
        "full_name": f"{side_name}{piece.korean_name}",
    }


def build_config(request: NewGameRequest) -> GameConfig:
    try:
        mode = GameMode(request.mode)
        difficulty = (
            Difficulty(request.difficulty)
            if request.difficulty
            else settings.default_difficulty
        )
        cho_formation, han_formation = (
            Formation.from_name(name) if name else Formation.INNER
            for name in (request.cho_formation, request.han_formation)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GameConfig(
        mode=mode,
        difficulty=difficulty,
        player_side=parse_side(request.player_side),
        cho_formation=cho_formation,
        han_formation=han_formation,
    )


def board_response(game_state: GameState) -> BoardResponse:
    game = game_state.game
    board = game.board

    board_array = [
        [piece.code if piece else None for piece in row] for row in board.grid
    ]
    board_korean = [[piece_to_korean_dict(piece) for piece in row] for row in board.grid]

    legal_moves = [
        {"from": from_pos.to_square(), "to": to_pos.to_square()}
        for from_pos, to_pos in game.all_moves()
    ]
    move_history = [
        record.to_dict(number) for number, record in enumerate(game.move_history, start=1)
    ]

    last_move = None
    if game.last_move is not None and not game.last_move.is_pass:
        last_move = {
            "from": game.last_move.from_pos.to_square(),
            "to": game.last_move.to_pos.to_square(),
        }

    result = game.result
    engine_side = game_state.config.engine_side
    return BoardResponse(
        board=board_array,
        board_korean=board_korean,
        setup=board.to_setup(),
        side_to_move=game.turn.value,
        game_over=game.is_game_over,
        winner=result.winner.value if result and result.winner else None,
        reason=result.reason.value if result else None,
        in_check=game.is_check(),
        is_bikjang=game.is_bikjang(),
        legal_moves=legal_moves,
        move_history=move_history,
        captured={
            side.value: [piece.code for piece in pieces]
            for side, pieces in game.captured_pieces.items()
        },
        material={side.value: count_material(board, side) for side in Side},
        last_move=last_move,
        can_undo=game.can_undo,
        mode=game_state.config.mode.value,
        engine_side=engine_side.value if engine_side else None,
    )


@app.post("/api/new-game")
async def new_game(request: NewGameRequest):
    """Create a new game."""
    config = build_config(request)
    if request.depth is not None and request.depth < 1:
        raise HTTPException(status_code=400, detail="Depth must be at least 1")

    board = None
    if request.custom_setup is not None:
        board = Board(custom_setup=request.custom_setup)
    game = JanggiGame(
        cho_formation=config.cho_formation,
        han_formation=config.han_formation,
        board=board,
        turn=parse_side(request.turn),
    )
    game_state = GameState(game, config, request.depth or config.depth)

    # Thread-safe game creation
    async with games_lock:
        previous = games.get(request.game_id)
        if previous is not None:
            previous.worker.cancel()
        games[request.game_id] = game_state

    logger.info(
        "New game %s: mode=%s depth=%d", request.game_id, config.mode.value, game_state.depth
    )
    asyncio.create_task(cleanup_old_games())

    return {
        "status": "ok",
        "game_id": request.game_id,
        "mode": config.mode.value,
        "depth": game_state.depth,
    }


@app.get("/api/board/{game_id}")
async def get_board(game_id: str):
    """Get current board state."""
    game_state = await get_game_state(game_id)
    async with game_state.lock:
        return board_response(game_state)


@app.post("/api/move")
async def make_move(request: MoveRequest):
    """Make a move."""
    game_state = await get_game_state(request.game_id)
    from_pos = square_to_position(request.from_square)
    to_pos = square_to_position(request.to_square)

    async with game_state.lock:
        game = game_state.game
        move = game.make_move(from_pos, to_pos)
        if move is None:
            logger.debug(
                "Illegal move %s%s in game %s",
                request.from_square,
                request.to_square,
                request.game_id,
            )
            raise HTTPException(status_code=400, detail="Illegal move")
        # Any search started on the previous position is now stale
        game_state.worker.cancel()
        response = {"status": "ok", "move": str(move), "notation": game.move_history[-1].notation}
        if game.result is not None:
            response["game_over"] = True
            response.update(game.result.to_dict())
    return response


@app.post("/api/pass/{game_id}")
async def pass_turn(game_id: str):
    """Pass the turn (한수쉼)."""
    game_state = await get_game_state(game_id)
    async with game_state.lock:
        if not game_state.game.pass_turn():
            raise HTTPException(status_code=400, detail="Cannot pass now")
        game_state.worker.cancel()
    return {"status": "ok"}


@app.post("/api/undo/{game_id}")
async def undo_move(game_id: str):
    """Undo the last move."""
    game_state = await get_game_state(game_id)
    async with game_state.lock:
        if not game_state.game.undo():
            raise HTTPException(status_code=400, detail="No moves to undo")
        game_state.worker.cancel()
    return {"status": "ok", "message": "Move undone successfully"}


@app.post("/api/undo-pair/{game_id}")
async def undo_move_pair(game_id: str):
    """Undo the last two moves (player's move and AI's move)."""
    game_state = await get_game_state(game_id)
    async with game_state.lock:
        game = game_state.game
        if len(game.move_history) < 2:
            raise HTTPException(status_code=400, detail="Not enough moves to undo")
        game.undo()
        game.undo()
        game_state.worker.cancel()
    return {"status": "ok", "message": "Two moves undone successfully"}


@app.post("/api/resign/{game_id}")
async def resign(game_id: str, side: Optional[str] = None):
    """Resign for ``side`` (defaults to the side to move)."""
    game_state = await get_game_state(game_id)
    async with game_state.lock:
        game = game_state.game
        if game.is_game_over:
            raise HTTPException(status_code=400, detail="Game is already over")
        game.resign(parse_side(side) if side else game.turn)
        game_state.worker.cancel()
        return {"status": "ok", **game.result.to_dict()}


@app.post("/api/ai-move/{game_id}")
async def ai_move(game_id: str):
    """Search and play a move for the side to move."""
    game_state = await get_game_state(game_id)

    async with game_state.lock:
        game = game_state.game
        if game.is_game_over:
            raise HTTPException(status_code=400, detail="Game is over")
        snapshot = game.snapshot()

    # Search runs without the lock so the board can still be read
    result = await game_state.worker.search(SearchRequest(snapshot, game_state.depth))
    if result is None:
        raise HTTPException(status_code=409, detail="Search was superseded by a newer request")

    async with game_state.lock:
        game = game_state.game
        if game.turn is not snapshot.turn or game.move_history != snapshot.move_history:
            raise HTTPException(status_code=409, detail="Game changed during search")

        if result.is_pass:
            if not game.pass_turn():
                raise HTTPException(status_code=500, detail="AI could not pass")
            response = {"status": "ok", "move": None, "is_pass": True}
        else:
            move = game.make_move(result.from_pos, result.to_pos)
            if move is None:
                raise HTTPException(status_code=500, detail="AI generated illegal move")
            response = {
                "status": "ok",
                "move": {
                    "from": result.from_pos.to_square(),
                    "to": result.to_pos.to_square(),
                },
                "is_pass": False,
                "score": result.score,
            }

        if game.result is not None:
            response["game_over"] = True
            response.update(game.result.to_dict())
    return response
