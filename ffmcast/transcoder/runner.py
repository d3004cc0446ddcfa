import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class Outcome(Enum):
    FINISHED = "finished"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class RunResult:
    outcome: Outcome
    returncode: int | None = None
    error: str | None = None


def run_ffmpeg(command: list[str]) -> RunResult:
    """Run ffmpeg in the foreground and block until it exits.

    ffmpeg inherits the terminal so its -stats output stays visible. A
    KeyboardInterrupt while waiting stops the child and counts as a
    cancellation rather than a failure. A second one kills it outright.
    """
    logger.info(f"starting ffmpeg: {shlex.join(command)}")

    try:
        proc = subprocess.Popen(command)
    except OSError as e:
        logger.error(f"could not start {command[0]}: {e}")
        return RunResult(Outcome.FAILED, error=str(e))

    with proc:
        try:
            status = proc.wait()
        except KeyboardInterrupt:
            logger.info("interrupted, stopping ffmpeg")

            # ffmpeg usually got the same SIGINT from the terminal already
            if proc.poll() is None:
                proc.terminate()

            try:
                status = proc.wait()
            except KeyboardInterrupt:
                logger.warning("interrupted again, killing ffmpeg")
                proc.kill()
                status = proc.wait()

            return RunResult(Outcome.CANCELLED, returncode=status)

    if status != 0:
        logger.error(f"ffmpeg failed (status {status})")
        return RunResult(Outcome.FAILED, returncode=status, error=f"exit status {status}")

    logger.info("ffmpeg finished")

    return RunResult(Outcome.FINISHED, returncode=status)
