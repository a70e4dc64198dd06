"""Runtime enforcement — flag layout violations on their way to the renderer.

Rendering collaborators call these checks before painting a block. They log
every violation and hand back a result; they never raise, so one bad block
degrades to a logged error instead of a crashed report.
"""

from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel, Field

from layout_grammar.models import BlockHeightResolution, ElementFitValidation, HeightResolutionPriority

logger = structlog.get_logger()


class EnforcementResult(BaseModel):
    """Outcome of one enforcement check."""

    is_critical: bool = Field(alias="isCritical")
    message: str
    context: Optional[dict[str, Any]] = None

    model_config = {"frozen": True, "populate_by_name": True}


def check_height_resolution(
    resolution: BlockHeightResolution, context: Optional[dict[str, Any]] = None
) -> EnforcementResult:
    """Critical when the block failed structurally or has to be split."""
    failed = resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE
    if not (failed or resolution.requires_split):
        return EnforcementResult(
            is_critical=False,
            message="Height resolution successful",
            context={"heightPx": resolution.height_px},
        )

    message = f"Layout grammar violation: height resolution failed. {resolution.reason}"
    full_context = {
        "heightPx": resolution.height_px,
        "priority": resolution.priority.name,
        "requiresSplit": resolution.requires_split,
        **(context or {}),
    }
    logger.error("layout_grammar_violation", check="height_resolution", detail=message, context=full_context)
    return EnforcementResult(is_critical=True, message=message, context=full_context)


def check_element_fit(
    validation: ElementFitValidation, context: Optional[dict[str, Any]] = None
) -> EnforcementResult:
    """Critical when the element does not fit its cell."""
    if validation.fits:
        return EnforcementResult(is_critical=False, message="Element fits correctly", context=context)

    actions = [a.value for a in validation.required_actions]
    message = (
        f"Layout grammar violation: element does not fit. "
        f"Violations: {', '.join(validation.violations)}. Required actions: {', '.join(actions)}"
    )
    full_context = {"violations": list(validation.violations), "requiredActions": actions, **(context or {})}
    logger.error("layout_grammar_violation", check="element_fit", detail=message, context=full_context)
    return EnforcementResult(is_critical=True, message=message, context=full_context)


def safe_check(check: Callable[[], EnforcementResult], fallback_message: str) -> EnforcementResult:
    """Run a check; if it crashes, log and report a non-critical result."""
    try:
        return check()
    except Exception as e:
        logger.error("enforcement_check_failed", detail=fallback_message, error=str(e), error_type=type(e).__name__)
        return EnforcementResult(
            is_critical=False,
            message=f"{fallback_message}: {e}",
            context={"error": str(e), "errorType": type(e).__name__},
        )
