from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(argv: Sequence[str], *, timeout_s: float = 60.0) -> CmdResult:
    """Run a host command and capture its output; the exit code is returned, not checked.

    Only used to inspect the host (package version queries); generated
    provisioning commands are never executed here.
    """

    argv_list = list(argv)
    logger.debug("CMD %s", _fmt_argv(argv_list))

    p = subprocess.run(
        argv_list,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        timeout=timeout_s,
    )

    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def safe_exec(argv: Sequence[str]) -> Tuple[str, bool]:
    """Run ``argv`` and return ``(stdout, ok)`` without ever raising.

    A missing binary or a timeout is reported as not ok.
    """

    try:
        r = run_cmd(argv)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Command unavailable: %s (%s)", _fmt_argv(argv), e)
        return "", False
    return r.stdout, r.returncode == 0
