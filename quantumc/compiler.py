"""Compiler driver: preprocess, tokenize and parse in one pipeline."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import List, Optional, Sequence

DEFAULT_OUTPUT = "a.out"


def _executable_dir() -> str:
    return os.path.dirname(os.path.realpath(sys.argv[0]))


def build_command(
    source: Optional[str] = None,
    output: str = DEFAULT_OUTPUT,
    tool_dir: Optional[str] = None,
) -> List[List[str]]:
    """Return the pipeline stages: preprocessor, tokenizer and parser.

    Without a source the preprocessor reads standard input. The tokenizer
    and parser are looked up in ``tool_dir``, which defaults to the
    directory of the running program.
    """
    directory = _executable_dir() if tool_dir is None else tool_dir
    return [
        ["cc", "-E", "-x", "c", source or "-"],
        [os.path.join(directory, "tokenizer")],
        [os.path.join(directory, "tokenparser"), "-o", output],
    ]


def _run_pipeline(commands: List[List[str]]) -> List[int]:
    processes = []
    upstream = None
    try:
        for position, command in enumerate(commands, 1):
            last = position == len(commands)
            process = subprocess.Popen(
                command,
                stdin=upstream,
                stdout=None if last else subprocess.PIPE,
            )
            if upstream is not None:
                upstream.close()
            upstream = process.stdout
            processes.append(process)
    except OSError:
        for process in processes:
            process.kill()
            process.wait()
        raise
    return [process.wait() for process in processes]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Compile a source file by running the whole pipeline."""
    args = sys.argv[1:] if argv is None else list(argv)
    source: Optional[str] = None
    output = DEFAULT_OUTPUT

    remaining = iter(args)
    for arg in remaining:
        if arg == "-o":
            path = next(remaining, None)
            if path is None:
                print("File path not given after '-o' option", file=sys.stderr)
                return 1
            if path != "-":
                output = path
        else:
            source = arg

    try:
        codes = _run_pipeline(build_command(source, output))
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0 if all(code == 0 for code in codes) else 1