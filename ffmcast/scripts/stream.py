import argparse
import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import yaml

from ffmcast import __version__
from ffmcast.config import load_config
from ffmcast.session import NoTrackError, confirm, gather_request, render_summary
from ffmcast.transcoder import (
    CommandBuildError,
    CommandBuilder,
    FfprobeException,
    Outcome,
    probe_media,
    run_ffmpeg,
)


def setup_logging(verbose: bool = False) -> None:
    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": True,
        "formatters": {
            "basic": {
                "class": "logging.Formatter",
                "format": "%(levelname)s %(message)s",
            },
            "detailed": {
                "class": "logging.Formatter",
                "format": (
                    "[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
                ),
            },
        },
        "handlers": {
            # stdout belongs to the prompts, keep log output on stderr
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "level": "DEBUG" if verbose else "WARNING",
                "formatter": "detailed" if verbose else "basic",
            },
        },
        "loggers": {
            "": {"level": "DEBUG", "handlers": ["console"]},
            "ffmcast": {"level": "DEBUG", "handlers": [], "propagate": True},
        },
    }

    if log_dir_str := os.getenv("FFMCAST_LOG_DIR"):
        log_dir = Path(log_dir_str).resolve()
        log_dir.mkdir(parents=True, exist_ok=True)

        logging_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_dir / "ffmcast.log"),
            "maxBytes": 1024**2 * 10,  # 10 MB
            "backupCount": 10,
            "level": "DEBUG",
            "formatter": "detailed",
        }

        logging_config["loggers"][""]["handlers"].append("file")

    logging.config.dictConfig(logging_config)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="transcode a media file to ogg and stream it to an icecast server"
    )

    parser.add_argument("mediafile", help="media file to stream")
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)
    logger.debug(f"ffmcast version {__version__}")

    path = Path(args.mediafile)

    if not path.is_file():
        print(f"File {path} does not exist")
        return 1

    try:
        config = load_config()
    # pydantic ValidationError is a ValueError, as is a YAML file that is not a mapping
    except (ValueError, yaml.YAMLError, FileNotFoundError) as e:
        logger.error(f"invalid configuration: {e}")
        return 1

    try:
        media = probe_media(path, binary=config.ffprobe_path)
        request = gather_request(config, media)
        command = CommandBuilder(config.ffmpeg_path).build(request, media)
    except (FfprobeException, NoTrackError, CommandBuildError) as e:
        logger.error(str(e))
        return 1
    except (KeyboardInterrupt, EOFError):
        print()
        return 1

    print(render_summary(command, request.ingest))

    try:
        if not confirm("Execute ffmpeg?"):
            return 0
    except (KeyboardInterrupt, EOFError):
        print()
        return 1

    result = run_ffmpeg(command)

    if result.outcome == Outcome.FINISHED:
        print("***** STREAM FINISHED *****")
        return 0

    if result.outcome == Outcome.CANCELLED:
        print("***** STREAM CANCELLED *****")
        return 1

    print(f"***** STREAM FAILED ({result.error}) *****")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
