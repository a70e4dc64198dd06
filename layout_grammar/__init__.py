"""Layout grammar — deterministic block heights and publish-gating fit checks.

Usage:
    from layout_grammar import validate_blocks_for_editor, check_publish_validity

    results = validate_blocks_for_editor(blocks, block_width_px=1200)
    if not check_publish_validity(results).can_publish:
        # Refuse to publish the template
"""

from layout_grammar.editor_api import (
    EditorValidationAPI,
    check_publish_validity,
    editor_validation_api,
    validate_block_for_editor,
    validate_blocks_for_editor,
)
from layout_grammar.fit import FitValidator, fit_validator
from layout_grammar.height_resolver import HeightResolver, height_resolver
from layout_grammar.models import (
    AspectRatio,
    BlockAspectRatioConstraint,
    BlockHeightResolution,
    BlockValidationResult,
    BodyType,
    CellConfiguration,
    ElementFitValidation,
    HeightResolutionInput,
    HeightResolutionPriority,
    ImageMode,
    PublishValidityResult,
    RequiredAction,
)

__all__ = [
    "EditorValidationAPI",
    "editor_validation_api",
    "validate_block_for_editor",
    "validate_blocks_for_editor",
    "check_publish_validity",
    "FitValidator",
    "fit_validator",
    "HeightResolver",
    "height_resolver",
    "AspectRatio",
    "BlockAspectRatioConstraint",
    "BlockHeightResolution",
    "BlockValidationResult",
    "BodyType",
    "CellConfiguration",
    "ElementFitValidation",
    "HeightResolutionInput",
    "HeightResolutionPriority",
    "ImageMode",
    "PublishValidityResult",
    "RequiredAction",
]
