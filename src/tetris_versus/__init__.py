"""Simulation core for a versus falling-block puzzle game."""

from .board import Board, BUFFER_HEIGHT, TOTAL_HEIGHT, VISIBLE_HEIGHT, WIDTH
from .tetromino import Tetromino, TetrominoType, rotation_cells
from .randomizer import BagRandomizer
from .scoring import ScoreTracker
from .config import GameConfig
from .events import EventQueue
from .game_state import PlayerState, PlayerView
from .controllers import Action, HumanController
from .ai import AIController, HeuristicWeights, Placement, find_best_placement
from .match import GameMode, Match, MenuAction
from .utils import fall_interval, render_grid

__all__ = [
    "Board",
    "WIDTH",
    "VISIBLE_HEIGHT",
    "BUFFER_HEIGHT",
    "TOTAL_HEIGHT",
    "Tetromino",
    "TetrominoType",
    "BagRandomizer",
    "ScoreTracker",
    "GameConfig",
    "EventQueue",
    "PlayerState",
    "PlayerView",
    "Action",
    "HumanController",
    "AIController",
    "HeuristicWeights",
    "Placement",
    "find_best_placement",
    "GameMode",
    "Match",
    "MenuAction",
    "fall_interval",
    "render_grid",
    "rotation_cells",
]
