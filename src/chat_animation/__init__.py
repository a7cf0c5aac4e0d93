from .core.models.animation import ChatAnimationType, ChatAnimationDuration
from .core.models.timing import ChatAnimationTimingFunction, CurvePoint
from .core.models.settings import (
    ChatAnimationSettings,
    ChatAnimationSettingsCommon,
    ChatAnimationSettingsEmoji,
)
from .services.animation.settings_manager import ChatAnimationSettingsManager

__all__ = [
    "ChatAnimationType",
    "ChatAnimationDuration",
    "ChatAnimationTimingFunction",
    "CurvePoint",
    "ChatAnimationSettings",
    "ChatAnimationSettingsCommon",
    "ChatAnimationSettingsEmoji",
    "ChatAnimationSettingsManager",
]
