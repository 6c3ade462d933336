"""
Input event model for DeepFake Defense.

Raw pygame events are translated into InputEvents carrying a discrete game
action. Pointer actions also carry the screen position.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from models import GameAction, Point2D


class InputEvent(BaseModel):
    """Immutable game action produced by the input adapter.

    Attributes:
        action: What the player asked for
        timestamp: Seconds, from a monotonic clock
        position: Pointer position for mouse and touch input

    Examples:
        >>> event = InputEvent(action=GameAction.SHOOT, timestamp=1.5)
        >>> print(event)
        InputEvent(shoot, t=1.500)
    """
    action: GameAction
    timestamp: float
    position: Optional[Point2D] = None

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f'Timestamp must be non-negative, got {v}')
        return v

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.position is None:
            return f"InputEvent({self.action.value}, t={self.timestamp:.3f})"
        return (f"InputEvent({self.action.value}, pos=({self.position.x:.0f}, "
                f"{self.position.y:.0f}), t={self.timestamp:.3f})")
