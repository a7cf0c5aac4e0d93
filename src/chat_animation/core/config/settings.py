from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class StorageConfig(BaseSettings):
    path: str = "data/chat_animation.db"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CHAT_ANIMATION_STORAGE_", extra="ignore")


class ExportConfig(BaseSettings):
    # None resolves to ~/Documents
    documents_dir: Optional[str] = None
    file_name: str = "TelegramChatAnimationSettings"
    file_extension: str = "tgios-anim"
    indent: int = 2

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CHAT_ANIMATION_EXPORT_", extra="ignore")

    @property
    def export_file_name(self) -> str:
        return f"{self.file_name}.{self.file_extension}"


storage_config = StorageConfig()
export_config = ExportConfig()
