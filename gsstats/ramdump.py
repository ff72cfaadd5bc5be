"""Dump of ramdump side files: the bootloader log and gzipped binary lists."""

from __future__ import annotations

import argparse
import base64
import gzip
import logging
import struct
import sys
from dataclasses import dataclass
from pathlib import Path

_log = logging.getLogger(__name__)

RAMDUMP_DIR = "/mnt/vendor/ramdump"
_HEADER = struct.Struct("<QQ")


@dataclass(frozen=True)
class AblLog:
    """Bootloader log: write index, buffer size and logged text."""

    i: int
    size: int
    text: bytes


def parse_abl_log(data) -> AblLog:
    """Parse a packed ``abl.log`` image: two little-endian u64 then the buffer.

    Raises ValueError when the data is shorter than the header.
    """
    data = bytes(data)
    if len(data) < _HEADER.size:
        raise ValueError("abl.log is shorter than its header")
    i, size = _HEADER.unpack_from(data)
    return AblLog(i=i, size=size, text=data[_HEADER.size:_HEADER.size + i])


def format_abl_log(data) -> str:
    """Render an ``abl.log`` image as a dump section."""
    log = parse_abl_log(data)
    text = log.text.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    return (
        f"------ Ramdump misc file: abl.log (i:0x{log.i:x} size:0x{log.size:x}) ------\n"
        f"{text}\n"
    )


def gzip_base64(data) -> str:
    """Gzip ``data`` and encode it as base64 in lines of 76 characters."""
    compressed = gzip.compress(bytes(data), mtime=0)
    return base64.encodebytes(compressed).decode("ascii")


def dump_gzipped_file_in_base64(title, file_path, out) -> None:
    """Write ``file_path`` gzipped in base64, with the command to decode it."""
    out.write(f"------ {title}, gzip < {file_path} | base64\n")
    out.write("base64 -d <<EOF | gunzip\n")
    try:
        data = Path(file_path).read_bytes()
    except OSError as exc:
        _log.error("cannot read %s: %s", file_path, exc)
    else:
        out.write(gzip_base64(data))
    out.write("EOF\n")


def main(argv=None) -> int:
    """Dump ramdump side files to standard output."""
    parser = argparse.ArgumentParser(description="Dump ramdump misc files.")
    parser.add_argument("--dir", default=RAMDUMP_DIR, help="ramdump directory")
    args = parser.parse_args(argv)
    out = sys.stdout
    base = Path(args.dir)

    try:
        data = (base / "abl.log").read_bytes()
    except OSError:
        out.write("*** Ramdump misc file: abl.log: File not found\n")
    else:
        try:
            out.write(format_abl_log(data))
        except ValueError:
            out.write("*** Ramdump misc file: abl.log: Malformed header\n")

    dump_gzipped_file_in_base64(
        "Ramdump misc file: acpm.lst (gzipped in base64)", f"{base}/acpm.lst", out
    )
    dump_gzipped_file_in_base64(
        "Ramdump misc file: s2d.lst (gzipped in base64)", f"{base}/s2d.lst", out
    )
    out.flush()
    return 0