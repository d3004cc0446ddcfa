import logging
from pathlib import Path

from ffmcast.models import MediaDescriptor, TrackRecord
from ffmcast.timestamp import Timestamp

from .ffprobe import FfprobeException, FfprobeResult, ffprobe

logger = logging.getLogger(__name__)


def descriptor_from_ffprobe(filename: str, info: FfprobeResult) -> MediaDescriptor:
    """Sort the probed streams by kind and read the container duration.

    Streams that are not audio, video or subtitle (data, attachments) are
    dropped. Duration is truncated to whole seconds.
    """
    tracks: dict[str, list[TrackRecord]] = {"audio": [], "video": [], "subtitle": []}

    for stream in info.get("streams", []):
        kind = stream["codec_type"]

        if kind not in tracks:
            logger.debug(f"ignoring {kind} stream #{stream['index']}")
            continue

        tracks[kind].append(
            TrackRecord(
                index=stream["index"],
                # ffprobe omits codec_name for codecs it has no decoder for
                codec_name=stream.get("codec_name", "unknown"),
                codec_kind=kind,
                tags={str(k): str(v) for k, v in stream.get("tags", {}).items()},
            )
        )

    duration = info.get("format", {}).get("duration")

    try:
        seconds = int(float(duration)) if duration is not None else 0
    except ValueError as e:
        raise FfprobeException(f"invalid duration reported for {filename}: {duration!r}") from e

    return MediaDescriptor(
        filename=filename,
        duration=Timestamp(seconds),
        audio_tracks=tuple(tracks["audio"]),
        video_tracks=tuple(tracks["video"]),
        subtitle_tracks=tuple(tracks["subtitle"]),
    )


def probe_media(path: Path | str, binary: str = "ffprobe") -> MediaDescriptor:
    media = descriptor_from_ffprobe(str(path), ffprobe(path, binary=binary))

    logger.info(
        f"probed {path}: {len(media.video_tracks)} video, {len(media.audio_tracks)} audio,"
        + f" {len(media.subtitle_tracks)} subtitle streams, duration {media.duration}"
    )

    return media
