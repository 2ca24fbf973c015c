"""Template transformers used by the unit renderer.

Transformation order:
1. PRUNE      - drop lines holding only an empty placeholder, collapse blank runs
2. LOOPS      - {{#each list}}...{{/each}} over metadata lists
3. VARIABLES  - single-pass {{name}} substitution
"""
from __future__ import annotations

from .base import ContentTransformer, TransformContext, TransformerPipeline
from .loops import LoopExpander
from .variables import ContextVariableTransformer
from .whitespace import BlankPlaceholderPruner

__all__ = [
    "ContentTransformer",
    "TransformContext",
    "TransformerPipeline",
    "BlankPlaceholderPruner",
    "LoopExpander",
    "ContextVariableTransformer",
]
