"""公開 API。"""

from radial_branch.api.generate import GenerationResult, generate, options_from_config
from radial_branch.core.options import (
    AnimationOptions,
    BranchOptions,
    GeneratorOptions,
    StyleOptions,
    options_from_mapping,
)

__all__ = [
    "AnimationOptions",
    "BranchOptions",
    "GenerationResult",
    "GeneratorOptions",
    "StyleOptions",
    "generate",
    "options_from_config",
    "options_from_mapping",
]
