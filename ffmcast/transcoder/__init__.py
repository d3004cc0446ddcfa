from .command import CommandBuildError, CommandBuilder, build_ffmpeg_command
from .ffprobe import FfprobeException, ffprobe
from .probe import probe_media
from .runner import Outcome, RunResult, run_ffmpeg

__all__ = [
    "CommandBuildError",
    "CommandBuilder",
    "FfprobeException",
    "Outcome",
    "RunResult",
    "build_ffmpeg_command",
    "ffprobe",
    "probe_media",
    "run_ffmpeg",
]
