#!/usr/bin/env python
"""Test chat animation settings manager"""

import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import json
import tempfile
from pathlib import Path
from chat_animation.core.config.settings import ExportConfig
from chat_animation.core.errors import DecodingError, FileReadError, FileWriteError, PathResolutionError
from chat_animation.core.models.animation import ChatAnimationDuration, ChatAnimationType
from chat_animation.core.models.settings import (
    ChatAnimationSettingsCommon,
    ChatAnimationSettingsEmoji,
    settings_for_type,
)
from chat_animation.infrastructure.storage.base import MemoryKeyValueStore
from chat_animation.infrastructure.storage.sqlite_store import SqliteKeyValueStore
from chat_animation.services.animation.settings_manager import ChatAnimationSettingsManager


class FlakyKeyValueStore(MemoryKeyValueStore):
    """Refuses or fails writes for some keys and fails reads for others."""

    def __init__(self, refused=(), broken=(), unreadable=()):
        super().__init__()
        self.refused = set(refused)
        self.broken = set(broken)
        self.unreadable = set(unreadable)

    def get(self, key: str):
        if key in self.unreadable:
            raise OSError("disk unavailable")
        return super().get(key)

    def set(self, key: str, value: bytes) -> bool:
        if key in self.broken:
            raise OSError("disk unavailable")
        if key in self.refused:
            return False
        return super().set(key, value)


def _customize(manager: ChatAnimationSettingsManager):
    """Move every slot away from its defaults."""
    for index, animation_type in enumerate(ChatAnimationType):
        settings = manager.get_settings(animation_type)
        settings.duration = ChatAnimationDuration.SLOW
        settings.y_position_func.start_time_offset = 0.05 * (index + 1)
        settings.time_appears_func.control_point_1.x = 0.1 * (index + 1)
    manager.get_settings(ChatAnimationType.EMOJI).emoji_scale_func.end_time_offset = 0.42
    manager.get_settings(ChatAnimationType.BIG).color_change_func.end_time_offset = 0.33


def _encoded_slots(manager: ChatAnimationSettingsManager):
    return {
        animation_type: manager.get_settings(animation_type).generate_json_data()[0]
        for animation_type in ChatAnimationType
    }


def test_defaults_with_empty_store():
    print("Testing manager defaults...")
    manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore())

    for animation_type in ChatAnimationType:
        settings = manager.get_settings(animation_type)
        assert settings.type is animation_type
        assert settings == settings_for_type(animation_type)
        if animation_type is ChatAnimationType.EMOJI:
            assert isinstance(settings, ChatAnimationSettingsEmoji)
        else:
            assert isinstance(settings, ChatAnimationSettingsCommon)

    assert manager.emoji_settings is manager.get_settings(ChatAnimationType.EMOJI)
    assert manager.video_settings is manager.get_settings(ChatAnimationType.VIDEO)
    print("✓ Every slot starts from its defaults")


def test_apply_changes_and_reload():
    print("Testing apply changes and reload...")
    store = MemoryKeyValueStore()
    manager = ChatAnimationSettingsManager(store=store)
    _customize(manager)

    failed = manager.apply_changes()

    assert failed == []
    for animation_type in ChatAnimationType:
        assert store.get(animation_type.storage_key) is not None

    reloaded = ChatAnimationSettingsManager(store=store)
    for animation_type in ChatAnimationType:
        assert reloaded.get_settings(animation_type) == manager.get_settings(animation_type)
    assert reloaded.emoji_settings.emoji_scale_func.end_time_offset == 0.42
    print("✓ Saved settings survive a restart")


def test_reload_after_apply_changes_uses_stored_values():
    print("Testing reload of every stored slot...")
    store = MemoryKeyValueStore()
    manager = ChatAnimationSettingsManager(store=store)
    _customize(manager)
    assert manager.apply_changes() == []

    reloaded = ChatAnimationSettingsManager(store=store)

    for animation_type in ChatAnimationType:
        loaded = reloaded.get_settings(animation_type)
        assert loaded == manager.get_settings(animation_type)
        assert loaded != settings_for_type(animation_type)
    print("✓ Every slot reloaded from the store, none reset")


def test_incomplete_stored_slot_falls_back():
    print("Testing stored slot with a missing field...")
    store = MemoryKeyValueStore()
    manager = ChatAnimationSettingsManager(store=store)
    _customize(manager)
    manager.apply_changes()

    payload = json.loads(store.get(ChatAnimationType.BIG.storage_key))
    del payload["colorChangeFunc"]
    store.set(ChatAnimationType.BIG.storage_key, json.dumps(payload).encode())

    reloaded = ChatAnimationSettingsManager(store=store)

    assert reloaded.big_settings == settings_for_type(ChatAnimationType.BIG)
    assert reloaded.small_settings == manager.small_settings
    print("✓ Incomplete slot replaced by defaults")


def test_unreadable_store_falls_back():
    print("Testing store that raises on read...")
    store = FlakyKeyValueStore(unreadable={ChatAnimationType.VIDEO.storage_key})
    source = ChatAnimationSettingsManager(store=store)
    _customize(source)
    source.apply_changes()

    manager = ChatAnimationSettingsManager(store=store)

    assert manager.video_settings == settings_for_type(ChatAnimationType.VIDEO)
    assert manager.voice_settings == source.voice_settings
    print("✓ Read failures never escape the constructor")


def test_corrupted_slot_falls_back_alone():
    print("Testing fallback isolation...")
    store = MemoryKeyValueStore()
    manager = ChatAnimationSettingsManager(store=store)
    _customize(manager)
    manager.apply_changes()

    store.set(ChatAnimationType.LINK.storage_key, b"\x00garbage{")
    reloaded = ChatAnimationSettingsManager(store=store)

    assert reloaded.link_settings == settings_for_type(ChatAnimationType.LINK)
    for animation_type in ChatAnimationType:
        if animation_type is ChatAnimationType.LINK:
            continue
        assert reloaded.get_settings(animation_type) == manager.get_settings(animation_type)
    print("✓ Only the corrupted slot was reset")


def test_misfiled_slot_falls_back():
    print("Testing settings stored under the wrong key...")
    store = MemoryKeyValueStore()
    big = settings_for_type(ChatAnimationType.BIG)
    big.duration = ChatAnimationDuration.FAST
    store.set(ChatAnimationType.SMALL.storage_key, big.generate_json_data()[0])
    store.set(ChatAnimationType.EMOJI.storage_key, big.generate_json_data()[0])

    manager = ChatAnimationSettingsManager(store=store)

    assert manager.small_settings == settings_for_type(ChatAnimationType.SMALL)
    assert manager.emoji_settings == settings_for_type(ChatAnimationType.EMOJI)
    print("✓ Misfiled settings replaced by defaults")


def test_apply_changes_continues_after_failures():
    print("Testing partial write failures...")
    store = FlakyKeyValueStore(
        refused={ChatAnimationType.BIG.storage_key},
        broken={ChatAnimationType.VOICE.storage_key},
    )
    manager = ChatAnimationSettingsManager(store=store)

    failed = manager.apply_changes()

    assert failed == [ChatAnimationType.BIG, ChatAnimationType.VOICE]
    for animation_type in ChatAnimationType:
        stored = store.get(animation_type.storage_key)
        if animation_type in failed:
            assert stored is None
        else:
            assert stored is not None
    print("✓ Remaining slots written despite failures")


def test_update_single_type():
    print("Testing update of one type...")
    manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore())
    other = ChatAnimationSettingsManager(store=MemoryKeyValueStore())
    _customize(other)
    held = manager.sticker_settings

    manager.update(other, ChatAnimationType.STICKER)

    assert manager.sticker_settings is held
    assert manager.sticker_settings == other.sticker_settings
    assert manager.small_settings == settings_for_type(ChatAnimationType.SMALL)
    assert manager.emoji_settings == settings_for_type(ChatAnimationType.EMOJI)
    print("✓ Only the selected slot was copied")


def test_update_all_types():
    print("Testing update of all types...")
    manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore())
    other = ChatAnimationSettingsManager(store=MemoryKeyValueStore())
    _customize(other)

    manager.update(other)

    assert _encoded_slots(manager) == _encoded_slots(other)
    print("✓ Every slot was copied")


def test_restore_defaults():
    print("Testing restore defaults...")
    manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore())
    _customize(manager)

    manager.restore_defaults(ChatAnimationType.EMOJI)

    assert manager.emoji_settings == settings_for_type(ChatAnimationType.EMOJI)
    assert manager.big_settings != settings_for_type(ChatAnimationType.BIG)

    manager.restore_defaults()

    for animation_type in ChatAnimationType:
        assert manager.get_settings(animation_type) == settings_for_type(animation_type)
    print("✓ Defaults restored per type and for all types")


def test_generate_json_string():
    print("Testing export JSON string...")
    manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore())

    text, error = manager.generate_json_string()

    assert error is None
    assert "\n  \"smallSettings\"" in text
    payload = json.loads(text)
    assert list(payload) == [
        "smallSettings", "bigSettings", "linkSettings", "emojiSettings",
        "stickerSettings", "voiceSettings", "videoSettings",
    ]
    assert payload["emojiSettings"]["type"] == "Emoji"
    assert payload["voiceSettings"]["duration"] == 0.75
    assert set(payload["smallSettings"]["yPositionFunc"]) == {
        "startTimeOffset", "endTimeOffset", "controlPoint1", "controlPoint2",
    }
    print("✓ Export is a pretty-printed document of all slots")


def test_export_import_round_trip():
    print("Testing export then import...")
    manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore())
    _customize(manager)

    data, error = manager.generate_json_data()
    assert error is None

    imported, error = ChatAnimationSettingsManager.decode_json(data, store=MemoryKeyValueStore())
    assert error is None
    for animation_type in ChatAnimationType:
        assert imported.get_settings(animation_type) == manager.get_settings(animation_type)
    print("✓ Imported manager matches the exported one")


def test_import_does_not_read_store():
    print("Testing import ignores stored settings...")
    store = MemoryKeyValueStore()
    stored = ChatAnimationSettingsManager(store=store)
    _customize(stored)
    stored.apply_changes()

    data = ChatAnimationSettingsManager(store=MemoryKeyValueStore()).generate_json_data()[0]
    imported, error = ChatAnimationSettingsManager.decode_json(data, store=store)

    assert error is None
    assert imported.small_settings == settings_for_type(ChatAnimationType.SMALL)
    print("✓ Imported manager reflects the file only")


def test_import_rejects_malformed_documents():
    print("Testing malformed imports...")
    manager, error = ChatAnimationSettingsManager.decode_json(b"not json")
    assert manager is None
    assert isinstance(error, DecodingError)

    payload = json.loads(ChatAnimationSettingsManager(store=MemoryKeyValueStore()).generate_json_data()[0])
    del payload["videoSettings"]
    manager, error = ChatAnimationSettingsManager.decode_json(json.dumps(payload))
    assert manager is None
    assert isinstance(error, DecodingError)

    payload = json.loads(ChatAnimationSettingsManager(store=MemoryKeyValueStore()).generate_json_data()[0])
    payload["smallSettings"], payload["bigSettings"] = payload["bigSettings"], payload["smallSettings"]
    manager, error = ChatAnimationSettingsManager.decode_json(json.dumps(payload))
    assert manager is None
    assert isinstance(error, DecodingError)
    print("✓ Malformed documents reported as DecodingError")


def test_generate_json_file():
    print("Testing export file...")
    with tempfile.TemporaryDirectory() as tmp_dir:
        config = ExportConfig(documents_dir=tmp_dir)
        manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore(), export_config=config)
        _customize(manager)

        path, error = manager.generate_json_file()

        assert error is None
        assert path == Path(tmp_dir) / "TelegramChatAnimationSettings.tgios-anim"
        assert path.read_bytes() == manager.generate_json_data()[0]
        assert sorted(os.listdir(tmp_dir)) == ["TelegramChatAnimationSettings.tgios-anim"]

        imported, error = ChatAnimationSettingsManager.read_json_file(path, store=MemoryKeyValueStore())
        assert error is None
        assert imported.big_settings == manager.big_settings
    print("✓ Export file written and read back")


def test_generate_json_file_cleans_up_after_failure():
    print("Testing failed export leaves no temp file...")
    with tempfile.TemporaryDirectory() as tmp_dir:
        config = ExportConfig(documents_dir=tmp_dir)
        manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore(), export_config=config)
        # A directory in the way makes the final move fail
        os.mkdir(os.path.join(tmp_dir, config.export_file_name))

        path, error = manager.generate_json_file()

        assert path is None
        assert isinstance(error, FileWriteError)
        assert sorted(os.listdir(tmp_dir)) == [config.export_file_name]
    print("✓ Temp file removed after a failed export")


def test_generate_json_file_without_directory():
    print("Testing export without documents directory...")
    with tempfile.TemporaryDirectory() as tmp_dir:
        config = ExportConfig(documents_dir=os.path.join(tmp_dir, "missing"))
        manager = ChatAnimationSettingsManager(store=MemoryKeyValueStore(), export_config=config)

        path, error = manager.generate_json_file()

        assert path is None
        assert isinstance(error, PathResolutionError)
    print("✓ Missing directory reported as PathResolutionError")


def test_read_missing_file():
    print("Testing import of a missing file...")
    with tempfile.TemporaryDirectory() as tmp_dir:
        manager, error = ChatAnimationSettingsManager.read_json_file(os.path.join(tmp_dir, "nope.tgios-anim"))

        assert manager is None
        assert isinstance(error, FileReadError)
    print("✓ Missing file reported as FileReadError")


def test_sqlite_backed_manager():
    print("Testing manager on sqlite storage...")
    with tempfile.TemporaryDirectory() as tmp_dir:
        db_path = os.path.join(tmp_dir, "chat_animation.db")
        manager = ChatAnimationSettingsManager(store=SqliteKeyValueStore(db_path))
        manager.get_settings(ChatAnimationType.VOICE).duration = ChatAnimationDuration.FAST
        assert manager.apply_changes() == []

        reloaded = ChatAnimationSettingsManager(store=SqliteKeyValueStore(db_path))

        assert reloaded.voice_settings.duration is ChatAnimationDuration.FAST
        assert reloaded.voice_settings == manager.voice_settings
    print("✓ Sqlite-backed manager persists settings")


def run_all_tests():
    print("=" * 50)
    print("Running Settings Manager Tests")
    print("=" * 50)

    test_defaults_with_empty_store()
    test_apply_changes_and_reload()
    test_reload_after_apply_changes_uses_stored_values()
    test_incomplete_stored_slot_falls_back()
    test_unreadable_store_falls_back()
    test_corrupted_slot_falls_back_alone()
    test_misfiled_slot_falls_back()
    test_apply_changes_continues_after_failures()
    test_update_single_type()
    test_update_all_types()
    test_restore_defaults()
    test_generate_json_string()
    test_export_import_round_trip()
    test_import_does_not_read_store()
    test_import_rejects_malformed_documents()
    test_generate_json_file()
    test_generate_json_file_cleans_up_after_failure()
    test_generate_json_file_without_directory()
    test_read_missing_file()
    test_sqlite_backed_manager()

    print("\n" + "=" * 50)
    print("✅ All settings manager tests passed!")
    print("=" * 50)


if __name__ == "__main__":
    run_all_tests()
