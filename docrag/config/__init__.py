"""Configuration module — exports Settings, RagConfig, and a module-level singleton."""

from docrag.config.settings import RagConfig, Settings

settings = Settings()

__all__ = ["RagConfig", "Settings", "settings"]
