"""
aibrain CLI

Entry point: argument parsing and dispatch only.
All command logic lives in aibrain.cli.handlers.
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from aibrain import __version__
from aibrain.cli.dispatch import dispatch_command
from aibrain.cli.parser import build_parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser(version=__version__)
    args = parser.parse_args(argv)
    return dispatch_command(parser, args)


if __name__ == "__main__":
    sys.exit(main())
