"""Worker that sums the numbers on each line of a shared region.

The worker maps the region named on its command line, waits for a byte on
standard input as the ready signal, replaces the region's contents with one
"Sum: N.NN" line per non-empty input line, and then writes a newline to
standard output as the done signal.
"""

from __future__ import annotations

import math
import re
import struct
import sys
from collections.abc import Sequence

from mmapsum.shared import CAPACITY, open_region

_LINE_LIMIT = 255
_FLT_MIN = float.fromhex("0x1p-126")
_F32 = struct.Struct("f")

_NUMBER = re.compile(
    rb"""
    [ \t\n\v\f\r]*
    (?P<num>
        [+-]?
        (?:
            0[xX](?P<hexmant>[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)
                (?:[pP][+-]?[0-9]+)?
          | (?P<inf>[iI][nN][fF](?:[iI][nN][iI][tT][yY])?)
          | (?P<nan>[nN][aA][nN](?:\([0-9A-Za-z_]*\))?)
          | (?P<decmant>[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?
        )
    )
    """,
    re.VERBOSE,
)


class ChildError(Exception):
    """Input that the worker cannot turn into sums."""


def _to_f32(value: float) -> float:
    try:
        return _F32.unpack(_F32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _parse_number(match: re.Match[bytes]) -> float:
    text = match["num"].decode("ascii")
    if match["nan"]:
        return float("-nan" if text.startswith("-") else "nan")
    if match["inf"]:
        return float(text)

    mantissa = match["hexmant"] or match["decmant"]
    try:
        value = float.fromhex(text) if match["hexmant"] else float(text)
    except OverflowError:
        raise ChildError("Number too large") from None
    if math.isinf(value):
        raise ChildError("Number too large")
    try:
        single = _F32.unpack(_F32.pack(value))[0]
    except OverflowError:
        raise ChildError("Number too large") from None
    if single == 0.0 and mantissa.strip(b"0.") != b"":
        raise ChildError("Number too large")
    if 0.0 < abs(single) < _FLT_MIN:
        raise ChildError("Number too large")
    return single


def sum_line(line: bytes | str) -> float:
    """Sum the whitespace-separated numbers on one line in single precision."""
    if isinstance(line, str):
        line = line.encode()
    line = line.split(b"\0", 1)[0]
    total = 0.0
    pos = 0
    end = len(line)
    while pos < end:
        while pos < end and line[pos] in b" \t":
            pos += 1
        if pos >= end or line[pos] == ord("\n"):
            break
        match = _NUMBER.match(line, pos)
        if match is None:
            raise ChildError("Parse error")
        total = _to_f32(total + _parse_number(match))
        pos = match.end()
    return total


def format_sum(num: float) -> str:
    """Render a sum as ``"Sum: <whole>.<two digits>\\n"``."""
    if not math.isfinite(num):
        raise ChildError("Number too large")
    sign = ""
    if num < 0:
        sign = "-"
        num = -num
    whole = int(num)
    scaled = _to_f32(_to_f32(num - whole) * 100)
    frac = min(int(scaled + 0.5), 99)
    return f"Sum: {sign}{whole}.{frac:02d}\n"


def process_data(data: bytes) -> bytes:
    """Return one formatted sum per non-empty line of ``data``."""
    results = [
        format_sum(sum_line(line[:_LINE_LIMIT]))
        for line in bytes(data).split(b"\n")
        if line
    ]
    return "".join(results).encode("ascii")


def _error(message: str) -> None:
    sys.stderr.write(message + "\n")
    sys.stderr.flush()


def _wait_ready() -> bool:
    stream = sys.stdin
    if stream is None:
        return False
    source = getattr(stream, "buffer", stream)
    return bool(source.read(1))


def _signal_done() -> None:
    sys.stdout.write("\n")
    sys.stdout.flush()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the worker on the region file named by the first argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _error("Usage: child <mmap_file>")
        return 1

    try:
        region = open_region(args[0])
    except OSError:
        _error("Cannot open mmap file")
        return 1
    except ValueError:
        _error("mmap error in child")
        return 1

    with region:
        if not _wait_ready():
            _error("No ready signal from parent")
            return 1
        try:
            result = process_data(region.read())
        except ChildError as exc:
            _error(str(exc))
            return 1
        region.write(result[:CAPACITY])

    _signal_done()
    return 0


if __name__ == "__main__":
    sys.exit(main())