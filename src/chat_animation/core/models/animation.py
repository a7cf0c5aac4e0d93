from enum import Enum


class ChatAnimationType(str, Enum):
    SMALL = "Small"
    BIG = "Big"
    LINK = "Link"
    EMOJI = "Emoji"
    STICKER = "Sticker"
    VOICE = "Voice"
    VIDEO = "Video"

    @property
    def display_name(self) -> str:
        return _TYPE_TITLES[self]

    @property
    def description(self) -> str:
        if self is ChatAnimationType.SMALL:
            return "Small Message (fits in the input field)"
        if self is ChatAnimationType.BIG:
            return "Big Message (doesn't fit into the input field)"
        return self.display_name

    @property
    def storage_key(self) -> str:
        return f"ChatAnimationSettingsFor{self.value}Type"


_TYPE_TITLES = {
    ChatAnimationType.SMALL: "Small Message",
    ChatAnimationType.BIG: "Big Message",
    ChatAnimationType.LINK: "Link with Preview",
    ChatAnimationType.EMOJI: "Single Emoji",
    ChatAnimationType.STICKER: "Sticker",
    ChatAnimationType.VOICE: "Voice Message",
    ChatAnimationType.VIDEO: "Video Message",
}


class ChatAnimationDuration(float, Enum):
    """Animation length in seconds."""

    FAST = 0.5
    MEDIUM = 0.75
    SLOW = 1.0

    @property
    def max_value(self) -> float:
        """Frame count at 60 fps, shown next to the curve editor."""
        return _DURATION_FRAMES[self]

    @property
    def description(self) -> str:
        if self is ChatAnimationDuration.SLOW:
            return "60f (1 sec)"
        return f"{int(self.max_value)}f"


_DURATION_FRAMES = {
    ChatAnimationDuration.FAST: 30.0,
    ChatAnimationDuration.MEDIUM: 45.0,
    ChatAnimationDuration.SLOW: 60.0,
}
