"""Driver that hands a file's contents to the summing worker.

The driver creates a shared region file and starts the worker on it. It then
copies the input file into the region and signals the worker by writing a
byte to its standard input. It waits for the worker's done signal, a line on
its standard output, and returns the region's new contents.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path

from mmapsum.shared import CAPACITY, create_region

_FILENAME_LIMIT = 255
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class ParentError(Exception):
    """A failure while preparing, running or collecting from the worker."""


def _default_command() -> tuple[list[str], dict[str, str]]:
    env = os.environ.copy()
    existing = env.get("PYTHONPATH")
    paths = [str(_PACKAGE_ROOT)] + ([existing] if existing else [])
    env["PYTHONPATH"] = os.pathsep.join(paths)
    return [sys.executable, "-m", "mmapsum.child"], env


def _read_input(filename: str | os.PathLike[str]) -> bytes:
    try:
        handle = open(filename, "rb")
    except OSError as exc:
        raise ParentError("Cannot open file") from exc
    with handle:
        try:
            return handle.read(CAPACITY - 1)
        except OSError as exc:
            raise ParentError("Error reading file") from exc


def _exchange(child: subprocess.Popen[bytes], region, data: bytes) -> bytes:
    region.write(data)
    try:
        child.stdin.write(b"\x01")
        child.stdin.flush()
        child.stdin.close()
    except (BrokenPipeError, OSError):
        pass
    done = child.stdout.read(1)
    if not done:
        code = child.wait()
        raise ParentError(f"child process failed with exit code {code}")
    result = region.read()
    child.wait()
    return result


def run(
    filename: str | os.PathLike[str],
    child_command: Sequence[str] | None = None,
) -> bytes:
    """Sum the lines of ``filename`` through the worker and return its output.

    ``child_command`` is the worker's command line without the region path,
    which is appended as its last argument. Raises ParentError on failure.
    """
    if child_command is None:
        command, env = _default_command()
    else:
        command, env = list(child_command), None

    fd, region_path = tempfile.mkstemp(prefix="mmapsum-")
    os.close(fd)
    try:
        with create_region(region_path) as region:
            try:
                child = subprocess.Popen(
                    [*command, region_path],
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    env=env,
                )
            except OSError as exc:
                raise ParentError("exec error") from exc
            with child:
                try:
                    data = _read_input(filename)
                    return _exchange(child, region, data)
                finally:
                    if child.poll() is None:
                        child.terminate()
                        child.wait()
    finally:
        try:
            os.unlink(region_path)
        except FileNotFoundError:
            pass


def _read_filename() -> str | None:
    stream = sys.stdin
    if stream is None:
        return None
    line = stream.readline()
    if not line:
        return None
    return line[:_FILENAME_LIMIT].split("\n", 1)[0]


def main(argv: Sequence[str] | None = None) -> int:
    """Prompt for a file name, sum its lines and print the result."""
    parser = argparse.ArgumentParser(
        prog="mmapsum",
        description="Sum the numbers on each line of a file using a worker "
        "process and a shared memory-mapped region.",
    )
    parser.parse_args(argv)

    sys.stdout.write("Enter filename: ")
    sys.stdout.flush()

    filename = _read_filename()
    if filename is None:
        sys.stderr.write("Error reading filename\n")
        return 1

    try:
        result = run(filename)
    except ParentError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    sys.stdout.write("Result:\n")
    if result:
        sys.stdout.write(result.decode("ascii", errors="replace"))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())