import logging
import os
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_core import PydanticSerializationError
from typing import Dict, List, Optional, Tuple, Union

from chat_animation.core.config.settings import ExportConfig, export_config as default_export_config
from chat_animation.core.errors import (
    ChatAnimationSettingsError,
    DecodingError,
    EncodingError,
    FileReadError,
    FileWriteError,
    PathResolutionError,
)
from chat_animation.core.models.animation import ChatAnimationType
from chat_animation.core.models.settings import (
    ChatAnimationSettings,
    ChatAnimationSettingsCommon,
    ChatAnimationSettingsEmoji,
    settings_class_for,
    settings_for_type,
)
from chat_animation.infrastructure.storage.base import KeyValueStore
from chat_animation.infrastructure.storage.sqlite_store import SqliteKeyValueStore

logger = logging.getLogger(__name__)

SLOT_FIELDS: Dict[ChatAnimationType, str] = {
    ChatAnimationType.SMALL: "small_settings",
    ChatAnimationType.BIG: "big_settings",
    ChatAnimationType.LINK: "link_settings",
    ChatAnimationType.EMOJI: "emoji_settings",
    ChatAnimationType.STICKER: "sticker_settings",
    ChatAnimationType.VOICE: "voice_settings",
    ChatAnimationType.VIDEO: "video_settings",
}


class ChatAnimationSettingsDocument(BaseModel):
    """All seven slots, as written to an export file."""

    model_config = ConfigDict(populate_by_name=True)

    small_settings: ChatAnimationSettingsCommon = Field(alias="smallSettings")
    big_settings: ChatAnimationSettingsCommon = Field(alias="bigSettings")
    link_settings: ChatAnimationSettingsCommon = Field(alias="linkSettings")
    emoji_settings: ChatAnimationSettingsEmoji = Field(alias="emojiSettings")
    sticker_settings: ChatAnimationSettingsCommon = Field(alias="stickerSettings")
    voice_settings: ChatAnimationSettingsCommon = Field(alias="voiceSettings")
    video_settings: ChatAnimationSettingsCommon = Field(alias="videoSettings")

    @model_validator(mode="after")
    def _check_slot_types(self) -> "ChatAnimationSettingsDocument":
        for animation_type, field_name in SLOT_FIELDS.items():
            slot_type = getattr(self, field_name).type
            if slot_type is not animation_type:
                raise ValueError(f"{field_name} holds {slot_type.value} settings")
        return self


class ChatAnimationSettingsManager:
    """
    Holds one settings object per message type.

    Settings are read from the key-value store on construction. A slot whose
    key is missing or whose payload does not decode starts from the built-in
    defaults instead; the caller is never told.

    There are two serialization surfaces:
    - ``apply_changes`` writes each slot under its own storage key
    - ``generate_json_*`` renders the whole manager as one export document
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        export_config: Optional[ExportConfig] = None,
        document: Optional[ChatAnimationSettingsDocument] = None,
    ):
        self._store = store
        self.export_config = export_config or default_export_config
        self._document = document if document is not None else self._load_document()

    @property
    def store(self) -> KeyValueStore:
        if self._store is None:
            self._store = SqliteKeyValueStore()
        return self._store

    @property
    def small_settings(self) -> ChatAnimationSettingsCommon:
        return self._document.small_settings

    @property
    def big_settings(self) -> ChatAnimationSettingsCommon:
        return self._document.big_settings

    @property
    def link_settings(self) -> ChatAnimationSettingsCommon:
        return self._document.link_settings

    @property
    def emoji_settings(self) -> ChatAnimationSettingsEmoji:
        return self._document.emoji_settings

    @property
    def sticker_settings(self) -> ChatAnimationSettingsCommon:
        return self._document.sticker_settings

    @property
    def voice_settings(self) -> ChatAnimationSettingsCommon:
        return self._document.voice_settings

    @property
    def video_settings(self) -> ChatAnimationSettingsCommon:
        return self._document.video_settings

    def get_settings(self, animation_type: ChatAnimationType) -> ChatAnimationSettings:
        """
        Settings held for a message type.

        Only the shared fields are guaranteed. Check ``type`` (or use
        ``isinstance``) before reaching for shape-specific curves.
        """
        return getattr(self._document, SLOT_FIELDS[animation_type])

    def apply_changes(self) -> List[ChatAnimationType]:
        """
        Persist every slot under its own storage key.

        Each write is attempted even if an earlier one failed.

        Returns:
            Types whose settings could not be written, empty on success
        """
        failed = []
        for animation_type in ChatAnimationType:
            key = animation_type.storage_key
            data, error = self.get_settings(animation_type).generate_json_data()
            if error is not None:
                logger.warning(f"Skipped saving {animation_type.value} settings ({key}): {error}")
                failed.append(animation_type)
                continue

            try:
                saved = self.store.set(key, data)
            except Exception as e:
                logger.warning(f"Failed to save {animation_type.value} settings ({key}): {e}", exc_info=True)
                saved = False
            if not saved:
                failed.append(animation_type)

        if failed:
            logger.warning(f"Saved {len(SLOT_FIELDS) - len(failed)} of {len(SLOT_FIELDS)} animation settings")
        return failed

    def update(self, other: "ChatAnimationSettingsManager", animation_type: Optional[ChatAnimationType] = None) -> None:
        for slot_type in self._selected_types(animation_type):
            self.get_settings(slot_type).update(other.get_settings(slot_type))

    def restore_defaults(self, animation_type: Optional[ChatAnimationType] = None) -> None:
        for slot_type in self._selected_types(animation_type):
            self.get_settings(slot_type).restore_defaults()

    def generate_json_data(self) -> Tuple[Optional[bytes], Optional[EncodingError]]:
        try:
            text = self._document.model_dump_json(by_alias=True, indent=self.export_config.indent)
            return text.encode("utf-8"), None
        except (PydanticSerializationError, ValueError) as e:
            error = EncodingError(f"Failed to encode animation settings: {e}")
            error.__cause__ = e
            return None, error

    def generate_json_string(self) -> Tuple[Optional[str], Optional[EncodingError]]:
        data, error = self.generate_json_data()
        if data is None:
            return None, error
        return data.decode("utf-8"), None

    def generate_json_file(self) -> Tuple[Optional[Path], Optional[ChatAnimationSettingsError]]:
        """
        Write the export document into the documents directory.

        The file is written next to its final name and then moved into place,
        so an existing export is never left half-written.
        """
        try:
            directory = self.resolve_documents_dir()
        except PathResolutionError as e:
            logger.warning(f"Cannot export animation settings: {e}")
            return None, e

        data, error = self.generate_json_data()
        if data is None:
            return None, error

        path = directory / self.export_config.export_file_name
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            tmp.write_bytes(data)
            tmp.replace(path)
        except OSError as e:
            logger.error(f"Error writing animation settings to {path}: {e}", exc_info=True)
            tmp.unlink(missing_ok=True)
            error = FileWriteError(f"Failed to write {path}: {e}")
            error.__cause__ = e
            return None, error

        logger.info(f"Exported animation settings to {path}")
        return path, None

    def resolve_documents_dir(self) -> Path:
        configured = self.export_config.documents_dir
        if configured:
            directory = Path(configured).expanduser()
        else:
            try:
                directory = Path.home() / "Documents"
            except RuntimeError as e:
                raise PathResolutionError(f"Cannot determine home directory: {e}") from e

        if not directory.is_dir():
            raise PathResolutionError(f"Documents directory {directory} does not exist")
        return directory

    @classmethod
    def decode_json(
        cls,
        data: Union[bytes, str],
        store: Optional[KeyValueStore] = None,
        export_config: Optional[ExportConfig] = None,
    ) -> Tuple[Optional["ChatAnimationSettingsManager"], Optional[DecodingError]]:
        """
        Build a manager from an export document.

        The result does not read the store; it is a snapshot to copy from
        with ``update``, or to persist with ``apply_changes``.
        """
        try:
            document = ChatAnimationSettingsDocument.model_validate_json(data)
        except ValidationError as e:
            error = DecodingError(f"Invalid animation settings document: {e.error_count()} error(s)")
            error.__cause__ = e
            return None, error
        return cls(store=store, export_config=export_config, document=document), None

    @classmethod
    def read_json_file(
        cls,
        path: Union[str, os.PathLike],
        store: Optional[KeyValueStore] = None,
        export_config: Optional[ExportConfig] = None,
    ) -> Tuple[Optional["ChatAnimationSettingsManager"], Optional[ChatAnimationSettingsError]]:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            logger.warning(f"Cannot read animation settings file {path}: {e}")
            error = FileReadError(f"Failed to read {path}: {e}")
            error.__cause__ = e
            return None, error
        return cls.decode_json(data, store=store, export_config=export_config)

    def _load_document(self) -> ChatAnimationSettingsDocument:
        slots = {
            field_name: self._load_settings(animation_type)
            for animation_type, field_name in SLOT_FIELDS.items()
        }
        return ChatAnimationSettingsDocument(**slots)

    def _load_settings(self, animation_type: ChatAnimationType) -> ChatAnimationSettings:
        try:
            return self._read_settings(animation_type)
        except Exception as e:
            logger.warning(
                f"Failed to load {animation_type.value} settings ({animation_type.storage_key}), using defaults: {e}",
                exc_info=True,
            )
            return settings_for_type(animation_type)

    def _read_settings(self, animation_type: ChatAnimationType) -> ChatAnimationSettings:
        key = animation_type.storage_key
        data = self.store.get(key)
        if data is None:
            logger.debug(f"No stored settings for {animation_type.value}, using defaults")
            return settings_for_type(animation_type)

        settings, error = settings_class_for(animation_type).decode_json(data)
        if error is not None:
            logger.warning(f"Discarding unreadable {animation_type.value} settings ({key}): {error}")
            return settings_for_type(animation_type)
        if settings.type is not animation_type:
            logger.warning(f"Discarding {settings.type.value} settings stored under {key}")
            return settings_for_type(animation_type)
        return settings

    @staticmethod
    def _selected_types(animation_type: Optional[ChatAnimationType]) -> List[ChatAnimationType]:
        if animation_type is None:
            return list(ChatAnimationType)
        return [animation_type]
