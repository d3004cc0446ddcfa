import json
import logging
import subprocess
from pathlib import Path
from typing import Literal, NotRequired, TypedDict, cast

logger = logging.getLogger(__name__)


class Stream(TypedDict):
    index: int
    codec_name: NotRequired[str]
    codec_long_name: NotRequired[str]
    codec_type: (
        Literal["video"]
        | Literal["audio"]
        | Literal["subtitle"]
        | Literal["data"]
        | Literal["attachment"]
    )
    width: NotRequired[int]
    height: NotRequired[int]
    channels: NotRequired[int]
    channel_layout: NotRequired[str]
    duration: NotRequired[str]
    tags: NotRequired[dict[str, str]]


class Format(TypedDict):
    filename: str
    nb_streams: int
    format_name: str
    duration: NotRequired[str]
    size: NotRequired[str]
    bit_rate: NotRequired[str]
    tags: NotRequired[dict[str, str]]


class FfprobeResult(TypedDict):
    streams: list[Stream]
    format: Format


class FfprobeException(Exception):
    pass


def ffprobe(path: Path | str, binary: str = "ffprobe") -> FfprobeResult:
    command = [
        binary,
        "-hide_banner",
        "-loglevel",
        "error",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        str(path),
    ]

    logger.debug(f"running {binary} on {path}")

    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise FfprobeException(f"could not run {binary}: {e}") from e

    if result.returncode != 0:
        raise FfprobeException(f"ffprobe failed: {result.stderr.strip()}")

    try:
        output = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise FfprobeException(f"ffprobe returned invalid json: {e}") from e

    return cast(FfprobeResult, output)
