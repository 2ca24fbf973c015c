"""Composition engine: fragments and a profile manifest in, documents out."""
from __future__ import annotations

from .assembler import PRELOADED_MARKER, ContentAssembler, SummaryEntry
from .engine import ProfileCompiler, compile_profile
from .errors import (
    CompositionError,
    FragmentNotFoundError,
    OutputWriteError,
    RenderError,
    TemplateError,
)
from .fragments import Fragment, FragmentPaths, FragmentRole, FragmentStore
from .manifest import (
    ManifestLoader,
    ProfileManifest,
    PromptSet,
    SkillAssignment,
    SkillMode,
    UnitDefinition,
)
from .renderer import TemplateRenderer, load_renderer, resolve_template
from .report import ArtifactResult, CompileResult, ValidationReport
from .sections import CLOSING_REMINDER_LINES, SECTION_ORDER, SectionMap
from .validation import ManifestValidator
from .writer import CompiledDocument, DocumentKind, OutputWriter

__all__ = [
    "ArtifactResult",
    "CLOSING_REMINDER_LINES",
    "CompileResult",
    "CompiledDocument",
    "CompositionError",
    "ContentAssembler",
    "DocumentKind",
    "Fragment",
    "FragmentNotFoundError",
    "FragmentPaths",
    "FragmentRole",
    "FragmentStore",
    "ManifestLoader",
    "ManifestValidator",
    "OutputWriteError",
    "OutputWriter",
    "PRELOADED_MARKER",
    "ProfileCompiler",
    "ProfileManifest",
    "PromptSet",
    "RenderError",
    "SECTION_ORDER",
    "SectionMap",
    "SkillAssignment",
    "SkillMode",
    "SummaryEntry",
    "TemplateError",
    "TemplateRenderer",
    "UnitDefinition",
    "ValidationReport",
    "compile_profile",
    "load_renderer",
    "resolve_template",
]
