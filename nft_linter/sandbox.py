import logging
import os
import secrets
from contextlib import contextmanager
from typing import Iterator, Optional

from . import canonical
from .models import ErrorKind, Failure
from .rules import ContentRuleEngine, format_findings

logger = logging.getLogger(__name__)

# 8 random bytes -> 16 hex characters
NAME_BYTES = 8


@contextmanager
def scratch_file(directory: str, content: str) -> Iterator[str]:
    """
    Write ``content`` to a randomly named .json file in ``directory`` and
    yield its path. The file is removed when the block exits, however it exits.
    """
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{secrets.token_hex(NAME_BYTES)}.json")
    # Exclusive create: never adopt (or later remove) a file we did not make
    handle = open(path, "x", encoding="utf-8")
    try:
        with handle:
            handle.write(content)
        yield path
    finally:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass


def lint_descriptor(descriptor: dict, engine: ContentRuleEngine, scratch_dir: str) -> Optional[Failure]:
    """Materialize the descriptor on disk and run the content rules over it."""
    content = canonical.dumps(descriptor, indent=2)
    with scratch_file(scratch_dir, content) as path:
        findings = engine.lint_file(path)

    if findings:
        logger.info("Lint findings:\n%s", format_findings(findings))
        return Failure(kind=ErrorKind.POLICY_VIOLATION, message="JSON fails linting checks")
    return None
