import logging
import re
import shlex

from ffmcast.models import MediaDescriptor, TrackRecord, TranscodeRequest

# picture-based subtitle codecs, these have to be overlaid instead of rendered by
# the subtitles filter. see https://wiki.videolan.org/Subtitles/ and
# `ffmpeg -codecs | grep '^ ..S'`
BITMAP_SUBTITLE_CODECS = {
    "dvd_subtitle",
    "dvb_subtitle",
    "dvb_teletext",
    "hdmv_pgs_subtitle",
}

FILTER_OUTPUT_LABEL = "[v]"

_FILTER_SPECIAL_CHARS = re.compile(r"([‘\[\]=;,’`])")


class CommandBuildError(Exception):
    pass


def is_bitmap_subtitle(track: TrackRecord) -> bool:
    return track.codec_name.lower() in BITMAP_SUBTITLE_CODECS


def escape_filter_path(path: str) -> str:
    """Escape a path for use as a filter argument inside -filter_complex.

    The passes must run in this order so that the backslashes added by a pass
    are not escaped again by a later one. See the "Notes on filtergraph
    escaping" section of the ffmpeg-filters manual.
    """
    path = _FILTER_SPECIAL_CHARS.sub(r"\\\1", path)
    path = path.replace(":", "\\\\:")
    path = path.replace("'", "\\\\\\'")

    return path


def subtitle_filter_index(media: MediaDescriptor, track: TrackRecord) -> int:
    """Position of ``track`` among the subtitle streams of ``media``.

    Filters address streams per type (``0:s:N``), which differs from the
    file-wide index reported by ffprobe.
    """
    for i, candidate in enumerate(media.subtitle_tracks):
        if candidate.index == track.index:
            return i

    raise CommandBuildError(
        f"subtitle stream #{track.index} is not one of the subtitle streams of {media.filename}"
    )


def build_filter_chain(request: TranscodeRequest, media: MediaDescriptor) -> tuple[list[str], str]:
    """Returns the filter chain stages and the stream to map as video output."""
    video_map = f"0:{request.video_track.index}"
    filters = [f"scale={request.resolution_scale}"]

    track = request.subtitle_track

    if track is None:
        return filters, video_map

    filter_idx = subtitle_filter_index(media, track)

    if is_bitmap_subtitle(track):
        filters.insert(0, f"[0:v][0:s:{filter_idx}]overlay")
        filters[-1] += FILTER_OUTPUT_LABEL

        return filters, FILTER_OUTPUT_LABEL

    # the subtitles filter reads the file again on its own and ignores -ss, so shift
    # the timestamps to where the seek landed and reset them afterwards.
    # see https://trac.ffmpeg.org/ticket/2067#comment:15
    filters.append(f"setpts=PTS+{request.seek.seconds}/TB")
    filters.append(f"subtitles={escape_filter_path(media.filename)}:si={filter_idx}")
    filters.append("setpts=PTS-STARTPTS")

    return filters, video_map


class CommandBuilder:
    def __init__(self, ffmpeg: str = "ffmpeg") -> None:
        self.logger = logging.getLogger(__name__)
        self.ffmpeg = ffmpeg

    def build(self, request: TranscodeRequest, media: MediaDescriptor) -> list[str]:
        audio_map = f"0:{request.audio_track.index}"
        filters, video_map = build_filter_chain(request, media)

        # ffmpeg's option parser is positional, keep the order of this list as is
        command = [
            self.ffmpeg,
            "-loglevel", "+warning", "-hide_banner", "-stats",
            "-probesize", "50M", "-analyzeduration", "100M",
            "-re", "-accurate_seek", "-seek_timestamp", "1", "-ss", request.seek.to_display(),
            "-i", media.filename,
            "-g", "50", "-bufsize", "6000k",
            "-f", "ogg", "-content_type", "application/ogg",
            "-map", audio_map, "-codec:a", "libvorbis", "-b:a", request.audio_bitrate,
            "-filter_complex", ",".join(filters), "-map", video_map,
            "-codec:v", "libtheora", "-b:v", request.video_bitrate,
            request.ingest.ingest_url(),
        ]  # fmt: skip

        self.logger.debug(f"ffmpeg command: {shlex.join(command)}")

        return command


def build_ffmpeg_command(
    request: TranscodeRequest, media: MediaDescriptor, ffmpeg: str = "ffmpeg"
) -> list[str]:
    return CommandBuilder(ffmpeg).build(request, media)
