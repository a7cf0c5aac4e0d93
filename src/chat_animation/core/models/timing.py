"""
Timing Function Module

A cubic Bezier easing curve that runs inside a window of a unit-length
animation. The window opens at ``start_time_offset`` and closes at
``1 - end_time_offset``; outside of it the animated property rests at its
start or end value.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError
from typing import Any, List, Optional, Tuple

from chat_animation.core.errors import DecodingError, EncodingError
from chat_animation.core.models.animation import ChatAnimationDuration

_NEWTON_ITERATIONS = 8
_BISECTION_ITERATIONS = 32
_EPSILON = 1e-6

DEFAULT_START_TIME_OFFSET = 0.0
DEFAULT_END_TIME_OFFSET = 0.0
DEFAULT_CONTROL_POINT_1 = (0.5, 0.0)
DEFAULT_CONTROL_POINT_2 = (0.5, 1.0)


class CurvePoint(BaseModel):
    # Non-finite values would serialize as null and never load back
    model_config = ConfigDict(allow_inf_nan=False, validate_assignment=True)

    x: float
    y: float


class ChatAnimationTimingFunction(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False, validate_assignment=True)

    start_time_offset: float = Field(alias="startTimeOffset")
    end_time_offset: float = Field(alias="endTimeOffset")
    control_point_1: CurvePoint = Field(alias="controlPoint1")
    control_point_2: CurvePoint = Field(alias="controlPoint2")

    @classmethod
    def default(cls, **overrides: Any) -> "ChatAnimationTimingFunction":
        """Full-window ease-in-out curve; keyword overrides replace single fields."""
        data = {
            "start_time_offset": DEFAULT_START_TIME_OFFSET,
            "end_time_offset": DEFAULT_END_TIME_OFFSET,
            "control_point_1": CurvePoint(x=DEFAULT_CONTROL_POINT_1[0], y=DEFAULT_CONTROL_POINT_1[1]),
            "control_point_2": CurvePoint(x=DEFAULT_CONTROL_POINT_2[0], y=DEFAULT_CONTROL_POINT_2[1]),
        }
        data.update(overrides)
        return cls(**data)

    @property
    def start_point(self) -> CurvePoint:
        return CurvePoint(x=0.0, y=0.0)

    @property
    def end_point(self) -> CurvePoint:
        return CurvePoint(x=1.0, y=1.0)

    @property
    def duration(self) -> float:
        # Negative when the offsets overlap; callers decide what that means.
        return 1.0 - (self.start_time_offset + self.end_time_offset)

    def update(self, other: "ChatAnimationTimingFunction") -> None:
        self.start_time_offset = other.start_time_offset
        self.end_time_offset = other.end_time_offset
        self.control_point_1 = other.control_point_1.model_copy()
        self.control_point_2 = other.control_point_2.model_copy()

    def restore_defaults(self) -> None:
        self.update(ChatAnimationTimingFunction.default())

    def value_at(self, progress: float) -> float:
        """
        Eased value of the curve for an overall animation progress.

        Args:
            progress: Position in the whole animation, 0.0 to 1.0

        Returns:
            0.0 before the window opens, 1.0 after it closes, the Bezier
            output in between
        """
        window = self.duration
        if window <= 0.0:
            return 0.0 if progress < self.start_time_offset else 1.0
        if progress <= self.start_time_offset:
            return 0.0
        if progress >= 1.0 - self.end_time_offset:
            return 1.0

        local_x = (progress - self.start_time_offset) / window
        t = self._solve_curve_x(local_x)
        return self._sample_curve(t, self.control_point_1.y, self.control_point_2.y)

    def sample(self, duration: ChatAnimationDuration) -> List[float]:
        """One eased value per frame, first and last frame included."""
        frames = int(duration.max_value)
        return [self.value_at(frame / frames) for frame in range(frames + 1)]

    def generate_json_data(self) -> Tuple[Optional[bytes], Optional[EncodingError]]:
        try:
            return self.model_dump_json(by_alias=True).encode("utf-8"), None
        except (PydanticSerializationError, ValueError) as e:
            error = EncodingError(f"Failed to encode timing function: {e}")
            error.__cause__ = e
            return None, error

    @classmethod
    def decode_json(cls, data: bytes) -> Tuple[Optional["ChatAnimationTimingFunction"], Optional[DecodingError]]:
        try:
            return cls.model_validate_json(data), None
        except ValidationError as e:
            error = DecodingError(f"Invalid timing function payload: {e.error_count()} error(s)")
            error.__cause__ = e
            return None, error

    @staticmethod
    def _sample_curve(t: float, p1: float, p2: float) -> float:
        # Cubic Bezier with fixed end points 0 and 1
        one_minus_t = 1.0 - t
        return 3.0 * one_minus_t * one_minus_t * t * p1 + 3.0 * one_minus_t * t * t * p2 + t * t * t

    @staticmethod
    def _sample_curve_derivative(t: float, p1: float, p2: float) -> float:
        one_minus_t = 1.0 - t
        return 3.0 * one_minus_t * one_minus_t * p1 + 6.0 * one_minus_t * t * (p2 - p1) + 3.0 * t * t * (1.0 - p2)

    def _solve_curve_x(self, x: float) -> float:
        x1 = self.control_point_1.x
        x2 = self.control_point_2.x

        t = x
        for _ in range(_NEWTON_ITERATIONS):
            error = self._sample_curve(t, x1, x2) - x
            if abs(error) < _EPSILON:
                return t
            slope = self._sample_curve_derivative(t, x1, x2)
            if abs(slope) < _EPSILON:
                break
            t -= error / slope

        low, high = 0.0, 1.0
        t = x
        for _ in range(_BISECTION_ITERATIONS):
            value = self._sample_curve(t, x1, x2)
            if abs(value - x) < _EPSILON:
                break
            if value < x:
                low = t
            else:
                high = t
            t = (low + high) / 2.0
        return t
