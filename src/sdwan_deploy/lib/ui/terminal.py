"""Interactive terminal detection for the orchestrator console.

Playbook runs are often launched from CI jobs or with output piped to a
file, where spinner frames and color codes would only add noise.
"""

from __future__ import annotations

import sys
from typing import TextIO


def is_tty(stream: TextIO | None = None) -> bool:
    """Check whether output goes to an interactive terminal.

    Args:
        stream: Stream to inspect (default: stdout). Streams without an
            ``isatty`` method count as non-interactive.

    Returns:
        True if the stream is a TTY, False for pipes, files and log capture.
    """
    target = stream if stream is not None else sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(isatty()) if callable(isatty) else False
