from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from gridcrawler.utils.logger import get_logger

LOG = get_logger("runner")

# Assume semantic versioning major.minor.patch
_VERSION_RE = re.compile(r"(\d+.\d+.\d+)")


def run_command(
    cmd: Sequence[str],
    *,
    dry_run: bool = False,
    capture: bool = False,
    shell: bool = False,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Execute a subprocess with unified logging and error handling.

    - Logs the exact command line.
    - Respects dry_run (no execution).
    - capture=False streams output; capture=True buffers output.
    - shell=True joins the tokens with single spaces and hands the line to
      bash, so redirections, ';' and quote tokens keep their shell meaning.
    - Merges provided env with the current process environment (preserves PATH).
    - Raises CalledProcessError on failure (after logging stdout/stderr).
    """
    log = logger or LOG
    line = " ".join(cmd)
    log.info("Running: %s", line)
    if dry_run:
        log.debug("[dry-run] command not executed")
        return subprocess.CompletedProcess(list(cmd), 0, "", "")

    env_dict = os.environ.copy()
    if env:
        env_dict.update({str(k): str(v) for k, v in env.items()})

    try:
        result = subprocess.run(
            line if shell else list(cmd),
            check=True,
            shell=shell,
            executable="/bin/bash" if shell else None,
            cwd=str(cwd) if cwd else None,
            env=env_dict,
            text=True,
            capture_output=capture,
        )
    except FileNotFoundError:
        log.error("Executable not found: %s (PATH=%s)", cmd[0], env_dict.get("PATH", ""))
        raise
    except subprocess.CalledProcessError as e:
        if e.stdout:
            log.error("STDOUT:\n%s", e.stdout.strip())
        if e.stderr:
            log.error("STDERR:\n%s", e.stderr.strip())
        log.error("Command failed with exit code %s", e.returncode)
        raise

    log.info("Command completed successfully.")
    if capture and result.stdout:
        log.debug("Captured STDOUT:\n%s", result.stdout.strip())
    return result


def can_run(program: str) -> bool:
    return shutil.which(program) is not None


def program_version(program: str, *, logger: Optional[logging.Logger] = None) -> Optional[str]:
    """Run '<program> --version' and pull out the first x.y.z it prints."""
    log = logger or LOG
    try:
        out = run_command([program, "--version"], capture=True, logger=log)
        text = f"{out.stdout}\n{out.stderr}"
    except subprocess.CalledProcessError as e:
        # Some tools print their version to stderr and exit non-zero
        text = e.stderr or ""
    except OSError as e:
        log.warning("Could not run '%s --version': %s", program, e)
        return None
    m = _VERSION_RE.search(text)
    return m.group(1) if m else None
