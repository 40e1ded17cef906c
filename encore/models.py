"""
Pydantic Models for Encore Game State
Mirrors the TypeScript types the board UI exchanges (camelCase aliases)
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Union
from enum import Enum


BOARD_ROWS = 7
BOARD_COLUMNS = 15
COLUMN_LABELS = "ABCDEFGHIJKLMNO"
# Column H: the only place a colour may be started.
ANCHOR_COLUMN = 7
STARTING_JOKERS = 8
COLORS_TO_FINISH = 2

WILD = "wild"


class GameColor(str, Enum):
    """Square colour enumeration"""
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    RED = "red"
    ORANGE = "orange"
    PURPLE = "purple"


# Faces of the colour dice (besides wild). Purple never shows on a die.
DICE_COLORS = (
    GameColor.YELLOW,
    GameColor.GREEN,
    GameColor.BLUE,
    GameColor.RED,
    GameColor.ORANGE,
)
DICE_NUMBERS = (1, 2, 3, 4, 5)


class DiceKind(str, Enum):
    """Dice kind enumeration"""
    COLOR = "color"
    NUMBER = "number"


class GamePhase(str, Enum):
    """Game phase enumeration.

    The ``-ai`` variants mark that the actor of the phase is computer
    controlled; they are left by timer-driven AI steps instead of UI input.
    """
    ROLLING = "rolling"
    ROLLING_AI = "rolling-ai"
    ACTIVE_SELECTION = "active-selection"
    ACTIVE_SELECTION_AI = "active-selection-ai"
    PASSIVE_SELECTION = "passive-selection"
    PASSIVE_SELECTION_AI = "passive-selection-ai"
    PLAYER_SWITCHING = "player-switching"
    GAME_OVER = "game-over"

    @property
    def is_ai(self) -> bool:
        return self.value.endswith("-ai")

    @property
    def is_rolling(self) -> bool:
        return self in (GamePhase.ROLLING, GamePhase.ROLLING_AI)

    @property
    def is_active_selection(self) -> bool:
        return self in (
            GamePhase.ACTIVE_SELECTION,
            GamePhase.ACTIVE_SELECTION_AI,
        )

    @property
    def is_passive_selection(self) -> bool:
        return self in (
            GamePhase.PASSIVE_SELECTION,
            GamePhase.PASSIVE_SELECTION_AI,
        )

    @property
    def is_selection(self) -> bool:
        return self.is_active_selection or self.is_passive_selection


class AIType(str, Enum):
    """AI type enumeration"""
    SIMPLE_HEURISTIC = "simple_heuristic"
    HEURISTIC = "heuristic"


class Position(BaseModel):
    """Board coordinate (row 0-6, column 0-14)"""
    row: int
    col: int

    class Config:
        frozen = True

    def to_key(self) -> str:
        """Convert position to string key"""
        return f"{self.row},{self.col}"

    @property
    def column_label(self) -> str:
        return COLUMN_LABELS[self.col]


class Square(BaseModel):
    """One cell of a player board"""
    color: GameColor
    has_star: bool = Field(False, alias="hasStar")
    crossed: bool = False
    column: str
    row: int

    class Config:
        populate_by_name = True


class Die(BaseModel):
    """A single die of the current roll.

    ``value`` is a colour name or ``"wild"`` for colour dice, 1-5 or
    ``"wild"`` for number dice.
    """
    id: str
    kind: DiceKind = Field(alias="type")
    value: Union[int, str]
    used: bool = False

    class Config:
        populate_by_name = True

    @property
    def is_wild(self) -> bool:
        return self.value == WILD

    def color_value(self) -> GameColor:
        return GameColor(self.value)

    def number_value(self) -> int:
        return int(self.value)


class SelectedDice(BaseModel):
    """Pending, unconfirmed die choice (at most one of each kind)"""
    color: Optional[Die] = None
    number: Optional[Die] = None

    def wild_count(self) -> int:
        return sum(
            1 for die in (self.color, self.number)
            if die is not None and die.is_wild
        )


class SelectedFromJoker(BaseModel):
    """Whether each pending choice consumes a joker"""
    color: bool = False
    number: bool = False


class Player(BaseModel):
    """Player state"""
    id: str
    name: str
    is_ai: bool = Field(False, alias="isAI")
    board_id: str = Field("classic", alias="boardId")
    board: List[List[Square]]
    stars_collected: int = Field(0, alias="starsCollected")
    completed_colors: List[GameColor] = Field(
        default_factory=list, alias="completedColors"
    )
    completed_colors_first: List[GameColor] = Field(
        default_factory=list, alias="completedColorsFirst"
    )
    completed_colors_not_first: List[GameColor] = Field(
        default_factory=list, alias="completedColorsNotFirst"
    )
    completed_columns_first: List[str] = Field(
        default_factory=list, alias="completedColumnsFirst"
    )
    completed_columns_not_first: List[str] = Field(
        default_factory=list, alias="completedColumnsNotFirst"
    )
    jokers_remaining: int = Field(STARTING_JOKERS, ge=0, alias="jokersRemaining")

    class Config:
        populate_by_name = True

    @property
    def completed_columns(self) -> List[str]:
        return self.completed_columns_first + self.completed_columns_not_first


class GameState(BaseModel):
    """Complete game state.

    ``current_player`` is the seat whose selection is being processed,
    ``active_player`` the seat that rolled this round. ``last_phase`` is
    only meaningful while ``phase`` is ``player-switching``.
    """
    id: str
    players: List[Player]
    current_player: int = Field(0, alias="currentPlayer")
    active_player: int = Field(0, alias="activePlayer")
    phase: GamePhase = GamePhase.ROLLING
    last_phase: Optional[GamePhase] = Field(None, alias="lastPhase")
    dice: List[Die] = Field(default_factory=list)
    selected_dice: SelectedDice = Field(
        default_factory=SelectedDice, alias="selectedDice"
    )
    selected_from_joker: SelectedFromJoker = Field(
        default_factory=SelectedFromJoker, alias="selectedFromJoker"
    )
    # column letter / colour name -> id of the player who claimed the bonus
    claimed_first_column_bonus: Dict[str, str] = Field(
        default_factory=dict, alias="claimedFirstColumnBonus"
    )
    claimed_first_color_bonus: Dict[str, str] = Field(
        default_factory=dict, alias="claimedFirstColorBonus"
    )
    winner: Optional[int] = None
    round_number: int = Field(1, alias="roundNumber")

    class Config:
        populate_by_name = True

    def current(self) -> Player:
        return self.players[self.current_player]


class BoardConfiguration(BaseModel):
    """Static board layout: 7x15 colours plus the starred coordinates"""
    id: str
    color_layout: List[List[GameColor]] = Field(alias="colorLayout")
    star_positions: List[Position] = Field(
        default_factory=list, alias="starPositions"
    )

    class Config:
        populate_by_name = True


class BoardValidationResult(BaseModel):
    """Outcome of a structural board check"""
    valid: bool
    errors: List[str] = Field(default_factory=list)


class EventType(str, Enum):
    """Inputs accepted by the state machine"""
    ROLL_DICE = "roll_dice"
    SELECT_DIE = "select_die"
    PROPOSE_MOVE = "propose_move"
    SKIP_TURN = "skip_turn"
    COMPLETE_PLAYER_SWITCH = "complete_player_switch"
    AI_STEP = "ai_step"


class GameEvent(BaseModel):
    """An input for :meth:`GameEngine.apply_event`.

    Timer-driven steps (``ai_step``, ``complete_player_switch``) are
    ordinary events so that the AI delay and the switch pause can be fed
    from any scheduler, including an immediate call in tests.
    """
    type: EventType
    die_id: Optional[str] = Field(None, alias="dieId")
    squares: List[Position] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        frozen = True


class AIDecision(BaseModel):
    """A move picked by the AI: the two dice plus the squares to cross"""
    color_die: Die = Field(alias="colorDie")
    number_die: Die = Field(alias="numberDie")
    color: GameColor
    squares: List[Position]
    score: float = 0.0

    class Config:
        populate_by_name = True


class AIConfig(BaseModel):
    """AI configuration"""
    ai_type: AIType = Field(AIType.HEURISTIC, alias="aiType")
    profile_id: Optional[str] = Field(None, alias="profileId")

    class Config:
        populate_by_name = True


class FinalScore(BaseModel):
    """Score breakdown for one player"""
    columns_score: int = Field(alias="columnsScore")
    jokers_score: int = Field(alias="jokersScore")
    colors_score: int = Field(alias="colorsScore")
    star_penalty: int = Field(alias="starPenalty")
    total_score: int = Field(alias="totalScore")

    class Config:
        populate_by_name = True


class Standing(BaseModel):
    """One row of the end-of-game table"""
    player_index: int = Field(alias="playerIndex")
    player_id: str = Field(alias="playerId")
    name: str
    score: FinalScore
    is_leader: bool = Field(False, alias="isLeader")

    class Config:
        populate_by_name = True
