"""
Validation pipeline for NFT descriptors.

    Start -> Structural -> HashCheck -> Sandboxed -> Done(valid)

Any stage may end the run with a rejection; nothing is retried. Unexpected
errors are logged and reported to the caller as a generic failure.
"""

import logging
from typing import Callable, NamedTuple

from . import canonical
from .address import validate_hex_address
from .integrity import verify_metahash
from .models import GENERIC_FAILURE_MESSAGE, ErrorKind, Failure, Verdict
from .rules import DEFAULT_RULES_PATH, ContentRuleEngine, RuleEngine
from .sandbox import lint_descriptor
from .validator import check_structure, normalize

logger = logging.getLogger(__name__)


class PipelineDeps(NamedTuple):
    address_validator: Callable
    engine: ContentRuleEngine
    scratch_dir: str


def default_deps(scratch_dir: str = "./tmp", rules_path=DEFAULT_RULES_PATH) -> PipelineDeps:
    return PipelineDeps(
        address_validator=validate_hex_address,
        engine=RuleEngine.from_file(rules_path),
        scratch_dir=scratch_dir,
    )


def _reject(stage: str, failure: Failure) -> Verdict:
    logger.info("Descriptor rejected at %s (%s): %s", stage, failure.kind.value, failure.message)
    return Verdict.reject(failure)


def validate(descriptor, deps: PipelineDeps) -> Verdict:
    """Run every check against ``descriptor`` and return a single verdict."""
    stage = "structural"
    try:
        failure = check_structure(descriptor, deps.address_validator)
        if failure:
            return _reject(stage, failure)
        normalize(descriptor)

        stage = "hash_check"
        failure = verify_metahash(descriptor)
        if failure:
            return _reject(stage, failure)

        stage = "sandboxed"
        failure = lint_descriptor(descriptor, deps.engine, deps.scratch_dir)
        if failure:
            return _reject(stage, failure)

        return Verdict.accept(canonical.dumps(descriptor, indent=2))
    except Exception:
        logger.exception("Validation failed unexpectedly at %s", stage)
        return _reject(stage, Failure(kind=ErrorKind.INTERNAL_FAILURE, message=GENERIC_FAILURE_MESSAGE))
