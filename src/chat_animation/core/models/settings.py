from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticSerializationError
from typing import Any, Optional, Tuple, Type, TypeVar

from chat_animation.core.errors import DecodingError, EncodingError
from chat_animation.core.models.animation import ChatAnimationDuration, ChatAnimationType
from chat_animation.core.models.defaults import DEFAULT_CURVES, DEFAULT_DURATION, default_timing_function
from chat_animation.core.models.timing import ChatAnimationTimingFunction

SettingsT = TypeVar("SettingsT", bound="ChatAnimationSettings")


class ChatAnimationSettings(BaseModel):
    """
    Fields every message type shares.

    Every field is required, both when constructing and when decoding.
    ``default`` builds an instance from the built-in presets of a type.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: ChatAnimationType = Field(frozen=True)
    duration: ChatAnimationDuration
    y_position_func: ChatAnimationTimingFunction = Field(alias="yPositionFunc")
    x_position_func: ChatAnimationTimingFunction = Field(alias="xPositionFunc")
    time_appears_func: ChatAnimationTimingFunction = Field(alias="timeAppearsFunc")

    @classmethod
    def default(cls: Type[SettingsT], animation_type: ChatAnimationType, **overrides: Any) -> SettingsT:
        """Preset settings for a type; keyword overrides replace single fields."""
        data = {"type": animation_type, "duration": DEFAULT_DURATION}
        presets = DEFAULT_CURVES.get(animation_type, {})
        for name in cls.timing_fields():
            if name in presets:
                data[name] = default_timing_function(animation_type, name)
        data.update(overrides)
        return cls(**data)

    @classmethod
    def timing_fields(cls) -> Tuple[str, ...]:
        return tuple(
            name for name, field in cls.model_fields.items()
            if field.annotation is ChatAnimationTimingFunction
        )

    def update(self: SettingsT, other: SettingsT) -> None:
        if type(other) is not type(self):
            raise TypeError(f"Cannot update {type(self).__name__} from {type(other).__name__}")
        self.duration = other.duration
        for name in self.timing_fields():
            getattr(self, name).update(getattr(other, name))

    def restore_defaults(self) -> None:
        self.update(type(self).default(self.type))

    def generate_json_data(self) -> Tuple[Optional[bytes], Optional[EncodingError]]:
        try:
            return self.model_dump_json(by_alias=True).encode("utf-8"), None
        except (PydanticSerializationError, ValueError) as e:
            error = EncodingError(f"Failed to encode {self.type.value} settings: {e}")
            error.__cause__ = e
            return None, error

    @classmethod
    def decode_json(cls: Type[SettingsT], data: bytes) -> Tuple[Optional[SettingsT], Optional[DecodingError]]:
        try:
            return cls.model_validate_json(data), None
        except ValidationError as e:
            error = DecodingError(f"Invalid {cls.__name__} payload: {e.error_count()} error(s)")
            error.__cause__ = e
            return None, error


class ChatAnimationSettingsCommon(ChatAnimationSettings):
    bubble_shape_func: ChatAnimationTimingFunction = Field(alias="bubbleShapeFunc")
    text_position_func: ChatAnimationTimingFunction = Field(alias="textPositionFunc")
    color_change_func: ChatAnimationTimingFunction = Field(alias="colorChangeFunc")

    @field_validator("type")
    @classmethod
    def _reject_emoji(cls, value: ChatAnimationType) -> ChatAnimationType:
        if value is ChatAnimationType.EMOJI:
            raise ValueError("emoji animations use ChatAnimationSettingsEmoji")
        return value


class ChatAnimationSettingsEmoji(ChatAnimationSettings):
    emoji_scale_func: ChatAnimationTimingFunction = Field(alias="emojiScaleFunc")

    @classmethod
    def default(
        cls, animation_type: ChatAnimationType = ChatAnimationType.EMOJI, **overrides: Any
    ) -> "ChatAnimationSettingsEmoji":
        return super().default(animation_type, **overrides)

    @field_validator("type")
    @classmethod
    def _require_emoji(cls, value: ChatAnimationType) -> ChatAnimationType:
        if value is not ChatAnimationType.EMOJI:
            raise ValueError("only emoji animations use ChatAnimationSettingsEmoji")
        return value


def settings_class_for(animation_type: ChatAnimationType) -> Type[ChatAnimationSettings]:
    if animation_type is ChatAnimationType.EMOJI:
        return ChatAnimationSettingsEmoji
    return ChatAnimationSettingsCommon


def settings_for_type(animation_type: ChatAnimationType) -> ChatAnimationSettings:
    """Default settings of the right shape for a message type."""
    return settings_class_for(animation_type).default(animation_type)
