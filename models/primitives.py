"""
Shared primitive data types for DeepFake Defense.

Point2D is the geometric value type used for pointer positions and menu
item anchors.
"""

from pydantic import BaseModel, ConfigDict


class Point2D(BaseModel):
    """Immutable 2D point for positions and coordinates.

    Coordinates can be positive, negative, or zero, allowing for off-screen
    positions.

    Attributes:
        x: X coordinate (horizontal)
        y: Y coordinate (vertical, grows downward)

    Examples:
        >>> pos = Point2D(x=100.0, y=200.0)
        >>> str(pos)
        'Point2D(x=100.00, y=200.00)'
    """
    x: float
    y: float

    model_config = ConfigDict(frozen=True)  # Immutable

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"
