"""
Built-in animation presets.

Every curve a settings object starts with, or returns to on restore, comes
from ``DEFAULT_CURVES``. An entry reads
``(start_time_offset, end_time_offset, control_point_1, control_point_2)``.
"""

from typing import Dict, Tuple

from chat_animation.core.models.animation import ChatAnimationDuration, ChatAnimationType
from chat_animation.core.models.timing import ChatAnimationTimingFunction, CurvePoint

CurvePreset = Tuple[float, float, Tuple[float, float], Tuple[float, float]]

DEFAULT_DURATION = ChatAnimationDuration.MEDIUM

DEFAULT_CURVES: Dict[ChatAnimationType, Dict[str, CurvePreset]] = {
    ChatAnimationType.SMALL: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.4, (0.33, 0.0), (0.0, 1.0)),
        "bubble_shape_func": (0.0, 0.5, (0.5, 0.0), (0.25, 1.0)),
        "text_position_func": (0.0, 0.5, (0.5, 0.0), (0.25, 1.0)),
        "color_change_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "time_appears_func": (0.4, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
    ChatAnimationType.BIG: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.45, (0.33, 0.0), (0.0, 1.0)),
        "bubble_shape_func": (0.0, 0.45, (0.5, 0.0), (0.25, 1.0)),
        "text_position_func": (0.0, 0.45, (0.5, 0.0), (0.25, 1.0)),
        "color_change_func": (0.0, 0.45, (0.5, 0.0), (0.5, 1.0)),
        "time_appears_func": (0.45, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
    ChatAnimationType.LINK: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.4, (0.33, 0.0), (0.0, 1.0)),
        "bubble_shape_func": (0.0, 0.4, (0.5, 0.0), (0.25, 1.0)),
        "text_position_func": (0.0, 0.4, (0.5, 0.0), (0.25, 1.0)),
        "color_change_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "time_appears_func": (0.5, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
    ChatAnimationType.EMOJI: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.3, (0.33, 0.0), (0.0, 1.0)),
        "emoji_scale_func": (0.0, 0.2, (0.4, 0.0), (0.2, 1.0)),
        "time_appears_func": (0.6, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
    ChatAnimationType.STICKER: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.3, (0.33, 0.0), (0.0, 1.0)),
        "bubble_shape_func": (0.0, 0.2, (0.4, 0.0), (0.2, 1.0)),
        "text_position_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "color_change_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "time_appears_func": (0.6, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
    ChatAnimationType.VOICE: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.35, (0.33, 0.0), (0.0, 1.0)),
        "bubble_shape_func": (0.0, 0.35, (0.4, 0.0), (0.2, 1.0)),
        "text_position_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "color_change_func": (0.0, 0.35, (0.5, 0.0), (0.5, 1.0)),
        "time_appears_func": (0.5, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
    ChatAnimationType.VIDEO: {
        "y_position_func": (0.0, 0.0, (0.33, 0.0), (0.0, 1.0)),
        "x_position_func": (0.0, 0.35, (0.33, 0.0), (0.0, 1.0)),
        "bubble_shape_func": (0.0, 0.25, (0.4, 0.0), (0.2, 1.0)),
        "text_position_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "color_change_func": (0.0, 0.5, (0.5, 0.0), (0.5, 1.0)),
        "time_appears_func": (0.5, 0.0, (0.5, 0.0), (0.5, 1.0)),
    },
}


def default_timing_function(animation_type: ChatAnimationType, field_name: str) -> ChatAnimationTimingFunction:
    """Fresh timing function for one field of one type; KeyError if absent."""
    start, end, (x1, y1), (x2, y2) = DEFAULT_CURVES[animation_type][field_name]
    return ChatAnimationTimingFunction(
        start_time_offset=start,
        end_time_offset=end,
        control_point_1=CurvePoint(x=x1, y=y1),
        control_point_2=CurvePoint(x=x2, y=y2),
    )
