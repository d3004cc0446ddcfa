from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self

from ffmcast.timestamp import Timestamp

CodecKind = Literal["audio", "video", "subtitle"]


class TrackRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="File-wide stream index as reported by ffprobe")
    codec_name: str
    codec_kind: CodecKind
    tags: dict[str, str] = Field(default_factory=dict)

    def __str__(self) -> str:
        tags = "".join(f"\n\tTAG: {k}: {v}" for k, v in self.tags.items())
        return f"stream #{self.index}: {self.codec_kind}/{self.codec_name}{tags}"


class MediaDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    duration: Timestamp
    audio_tracks: tuple[TrackRecord, ...] = ()
    video_tracks: tuple[TrackRecord, ...] = ()
    subtitle_tracks: tuple[TrackRecord, ...] = ()

    @model_validator(mode="after")
    def validate_track_kinds(self) -> Self:
        for kind, tracks in (
            ("audio", self.audio_tracks),
            ("video", self.video_tracks),
            ("subtitle", self.subtitle_tracks),
        ):
            for track in tracks:
                if track.codec_kind != kind:
                    raise ValueError(
                        f"stream #{track.index} is {track.codec_kind}, not {kind}"
                    )
        return self


class IngestTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    auth: str = Field(description="Icecast source credentials, user:pass")
    host: str = Field(description="Icecast server, host:port")
    mount: str = Field(description="Icecast mount point")

    def ingest_url(self) -> str:
        return f"icecast://{self.auth}@{self.host}/{self.mount}"

    def playback_url(self) -> str:
        return f"http://{self.host}/{self.mount}"


class TranscodeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    audio_bitrate: str
    video_bitrate: str
    resolution_scale: str
    seek: Timestamp
    ingest: IngestTarget
    video_track: TrackRecord
    audio_track: TrackRecord
    subtitle_track: TrackRecord | None = None
