import os
import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)
from typing_extensions import override

DEFAULT_AUDIO_BITRATE = "128K"
DEFAULT_VIDEO_BITRATE = "900K"
DEFAULT_RESOLUTION_SCALE = "480:-1"  # scale to 480p, keep aspect ratio

DEFAULT_ICECAST_AUTH = "hackme:hackme"
DEFAULT_ICECAST_HOST = "localhost:8000"
DEFAULT_ICECAST_MOUNT = "stream.ogg"

BITRATE_PATTERN = re.compile(r"^[0-9]+[KMG](ib)?$")
RESOLUTION_SCALE_PATTERN = re.compile(r"^-?\d+:-?\d+$")
AUTH_PATTERN = re.compile(r"^.*?:.*?$")


def find_config_path() -> Path | None:
    """Locate the YAML config file, if there is one.

    Priority (high to low):
    1. FFMCAST_CONFIG_PATH environment variable
    2. ./config.yaml
    3. $XDG_CONFIG_HOME/ffmcast/config.yaml
    4. $HOME/.config/ffmcast/config.yaml
    """
    if config_path := os.getenv("FFMCAST_CONFIG_PATH"):
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"FFMCAST_CONFIG_PATH points to a missing file: {path}")
        return path.resolve()

    candidates = [Path("config.yaml")]

    if xdg_config_home := os.getenv("XDG_CONFIG_HOME"):
        candidates.append(Path(xdg_config_home) / "ffmcast" / "config.yaml")

    if home := os.getenv("HOME"):
        candidates.append(Path(home) / ".config" / "ffmcast" / "config.yaml")

    for path in candidates:
        if path.is_file():
            return path.resolve()

    return None


class TranscodingConfig(BaseModel):
    audio_bitrate: str = Field(DEFAULT_AUDIO_BITRATE, description="Vorbis bitrate, e.g. 128K")
    video_bitrate: str = Field(DEFAULT_VIDEO_BITRATE, description="Theora bitrate, e.g. 900K")
    resolution_scale: str = Field(
        DEFAULT_RESOLUTION_SCALE, description="Argument to the scale filter, width:height"
    )

    @field_validator("audio_bitrate", "video_bitrate")
    @classmethod
    def validate_bitrate(cls, v: str) -> str:
        if not BITRATE_PATTERN.match(v):
            raise ValueError(f"invalid bitrate {v!r}, expected something like 128K")
        return v

    @field_validator("resolution_scale")
    @classmethod
    def validate_resolution_scale(cls, v: str) -> str:
        if not RESOLUTION_SCALE_PATTERN.match(v):
            raise ValueError(f"invalid resolution scale {v!r}, expected width:height")
        return v


class IcecastConfig(BaseModel):
    auth: str = Field(DEFAULT_ICECAST_AUTH, description="Source credentials, user:pass")
    host: str = Field(DEFAULT_ICECAST_HOST, min_length=1, description="Server address, host:port")
    mount: str = Field(DEFAULT_ICECAST_MOUNT, min_length=1, description="Mount point")

    @field_validator("auth")
    @classmethod
    def validate_auth(cls, v: str) -> str:
        if not AUTH_PATTERN.match(v):
            raise ValueError("auth must be in the form user:pass")
        return v


class PromptConfig(BaseModel):
    quality: bool = Field(True, description="Prompt for bitrates and scale on startup")
    icecast: bool = Field(False, description="Prompt for icecast settings on startup")


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FFMCAST_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    transcoding: TranscodingConfig = Field(default_factory=TranscodingConfig)
    icecast: IcecastConfig = Field(default_factory=IcecastConfig)
    prompts: PromptConfig = Field(default_factory=PromptConfig)
    ffmpeg_path: str = Field("ffmpeg", min_length=1, description="ffmpeg executable")
    ffprobe_path: str = Field("ffprobe", min_length=1, description="ffprobe executable")

    @classmethod
    @override
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)

        if (config_path := find_config_path()) is not None:
            sources += (YamlConfigSettingsSource(settings_cls, config_path),)

        return sources


def load_config() -> Config:
    return Config()
