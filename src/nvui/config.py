"""Configuration management for nvui."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nvui.nvim import UiAttachOptions


class Settings(BaseSettings):
    """Application settings, read from ``NVUI_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="NVUI_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Peer
    nvim_bin: str = Field(default="nvim", description="Editor executable to embed")
    nvim_args: list[str] = Field(default_factory=lambda: ["--embed"], description="Arguments for the editor")
    server: str | None = Field(default=None, description="host:port or socket path of a running editor")
    request_timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for a response")

    # UI
    width: int = Field(default=80, gt=0)
    height: int = Field(default=40, gt=0)
    rgb: bool = True
    ext_linegrid: bool = True
    ext_cmdline: bool = True
    initial_keys: str = Field(default=":", description="Keys sent right after attaching")
    quit_after: float | None = Field(default=None, gt=0, description="Detach after this many seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "rich"] = Field(default="default", description="Log output profile")

    @property
    def argv(self) -> list[str]:
        return [self.nvim_bin, *self.nvim_args]

    def ui_options(self) -> UiAttachOptions:
        return UiAttachOptions(rgb=self.rgb, ext_linegrid=self.ext_linegrid, ext_cmdline=self.ext_cmdline)


def get_settings(**overrides: Any) -> Settings:
    """Load settings, letting explicit non-``None`` overrides win over the environment."""

    updates = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**updates)
