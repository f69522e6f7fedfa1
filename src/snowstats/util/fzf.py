# snowstats/util/fzf.py
"""
Track selection using `fzf`
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from shutil import which

from snowstats.errors import FzfNotFoundError, SelectionError


def fzf_select_paths(
        paths: list[Path], *,
        header: str,
        labels: dict[Path, str] | None = None,
        multi: bool = True,
) -> list[Path]:
    """
    Let the user pick track files; returns [] when the selection is aborted.

    Each line shows the display label (or filename) and searches on it; the
    full path rides along in a hidden second column.
    """
    if not which("fzf"):
        raise FzfNotFoundError("fzf not found on PATH. Install fzf or pass track files explicitly.")

    labels = labels or {}
    lines = [f"{labels.get(p, p.name)}\t{p}" for p in paths]
    input_text = "\n".join(lines) + "\n"
    selected: list[Path] = []

    cmd = [
        "fzf",
        "--ansi",
        "--delimiter=\t",
        "--nth=1",
        "--with-nth=1",
        "--height=60%",
        "--layout=reverse",
        "--border",
        "--header", header,
    ]

    if multi:
        cmd.append("--multi")

    proc = subprocess.run(
        cmd,
        input=input_text.encode(),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    # 1 = no match, 130 = interrupted
    if proc.returncode not in (0, 1, 130):
        raise SelectionError(proc.stderr.decode(errors="replace"))

    out = proc.stdout.decode().strip()
    if not out:
        return []

    for line in out.splitlines():
        line = line.strip()
        if not line:
            continue
        # line is: "label<TAB>fullpath"
        path_str = line.split("\t", 1)[1] if "\t" in line else line
        selected.append(Path(path_str).expanduser().resolve())
    return selected
