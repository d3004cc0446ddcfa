import logging
import shlex

from ffmcast.config import AUTH_PATTERN, BITRATE_PATTERN, RESOLUTION_SCALE_PATTERN, Config
from ffmcast.models import IngestTarget, MediaDescriptor, TrackRecord, TranscodeRequest
from ffmcast.prompt import (
    ANY_PATTERN,
    TIMESTAMP_PATTERN,
    Reader,
    Writer,
    prompt,
    prompt_track_selection,
)
from ffmcast.timestamp import Timestamp

logger = logging.getLogger(__name__)


class NoTrackError(Exception):
    pass


def gather_request(
    config: Config,
    media: MediaDescriptor,
    read: Reader | None = None,
    write: Writer | None = None,
) -> TranscodeRequest:
    """Ask the user for everything a TranscodeRequest needs.

    Prompts that are turned off in the config use the configured value.
    """
    quality = config.transcoding
    icecast = config.icecast

    if not media.video_tracks or not media.audio_tracks:
        raise NoTrackError(f"{media.filename} needs at least one video and one audio stream")

    auth, host, mount = icecast.auth, icecast.host, icecast.mount

    if config.prompts.icecast:
        auth = prompt("Icecast Auth", auth, AUTH_PATTERN, read=read, write=write)
        host = prompt("Icecast Host", host, ANY_PATTERN, read=read, write=write)
        mount = prompt("Icecast Mount", mount, ANY_PATTERN, read=read, write=write)

    audio_bitrate = quality.audio_bitrate
    video_bitrate = quality.video_bitrate
    resolution_scale = quality.resolution_scale

    if config.prompts.quality:
        audio_bitrate = prompt(
            "Audio Bitrate", audio_bitrate, BITRATE_PATTERN, read=read, write=write
        )
        video_bitrate = prompt(
            "Video Bitrate", video_bitrate, BITRATE_PATTERN, read=read, write=write
        )
        resolution_scale = prompt(
            "Resolution Scale", resolution_scale, RESOLUTION_SCALE_PATTERN, read=read, write=write
        )

    seek = Timestamp.from_display(
        prompt(
            f"Seek (00:00:00 - {media.duration.to_display()})",
            "00:00:00",
            TIMESTAMP_PATTERN,
            read=read,
            write=write,
        )
    )

    # -1 picks the first video/audio stream, but no subtitles at all
    video_track: TrackRecord = prompt_track_selection(
        "Video Stream Selection", media.video_tracks, "0", media.video_tracks[0], read, write
    )
    audio_track: TrackRecord = prompt_track_selection(
        "Audio Stream Selection", media.audio_tracks, "0", media.audio_tracks[0], read, write
    )
    subtitle_track: TrackRecord | None = prompt_track_selection(
        "Subtitle Stream Selection", media.subtitle_tracks, "0", None, read, write
    )

    logger.debug(
        f"selected video #{video_track.index}, audio #{audio_track.index}, subtitle"
        + f" #{subtitle_track.index if subtitle_track is not None else None}"
    )

    return TranscodeRequest(
        audio_bitrate=audio_bitrate,
        video_bitrate=video_bitrate,
        resolution_scale=resolution_scale,
        seek=seek,
        ingest=IngestTarget(auth=auth, host=host, mount=mount),
        video_track=video_track,
        audio_track=audio_track,
        subtitle_track=subtitle_track,
    )


def render_summary(command: list[str], ingest: IngestTarget) -> str:
    rule = "-" * 45

    return "\n".join(
        [
            "",
            "ffmpeg command",
            rule,
            shlex.join(command),
            "",
            "stream URL",
            rule,
            ingest.playback_url(),
            "",
        ]
    )


def confirm(question: str, read: Reader | None = None, write: Writer | None = None) -> bool:
    return prompt(question, "y", ANY_PATTERN, read=read, write=write).lower().startswith("y")
