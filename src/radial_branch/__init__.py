"""radial_branch: 決定的な放射状分岐図と、その成長アニメーションのタイムラインを生成する。"""

from radial_branch.api import (
    AnimationOptions,
    BranchOptions,
    GenerationResult,
    GeneratorOptions,
    StyleOptions,
    generate,
    options_from_config,
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
