"""Output writer for compiled documents.

The writer owns the generated subtrees under the output root. Each run
removes them first, then writes documents one at a time as they are
produced. A failure stops the run; documents written before it stay on disk.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List

from promptsmith.core.config.settings import OutputLayout
from promptsmith.core.exceptions import PromptsmithError
from promptsmith.core.utils.io import write_text

from .errors import OutputWriteError
from .report import ArtifactResult

logger = logging.getLogger(__name__)


class DocumentKind:
    UNIT = "unit"
    SKILL = "skill"
    SKILL_SUPPORT = "skill-support"
    COMMAND = "command"
    INSTRUCTIONS = "instructions"


@dataclass(frozen=True)
class CompiledDocument:
    """Rendered text bound for ``<output root>/<target_path>``."""

    target_path: str
    rendered_text: str
    source_name: str
    kind: str = DocumentKind.UNIT


class OutputWriter:
    """Reset the generated subtrees and write compiled documents.

    Usage:
        writer = OutputWriter(output_root, layout)
        results = writer.write(documents)
    """

    def __init__(self, output_root: Path, layout: OutputLayout) -> None:
        self.output_root = Path(output_root)
        self.layout = layout

    def managed_paths(self) -> List[Path]:
        return [
            self.output_root / self.layout.units,
            self.output_root / self.layout.skills,
            self.output_root / self.layout.commands,
            self.output_root / self.layout.instructions_file,
        ]

    def reset(self) -> None:
        """Remove every path this writer manages; nothing else under the root is touched."""
        for path in self.managed_paths():
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                elif path.exists() or path.is_symlink():
                    path.unlink()
            except OSError as exc:
                raise OutputWriteError(
                    f"Cannot clear {path}: {exc}",
                    context={"artifact": str(path)},
                ) from exc
            logger.debug("Cleared %s", path)

    def target(self, relative: str) -> Path:
        rel = PurePosixPath(relative)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise OutputWriteError(
                f"Refusing to write outside the output root: {relative}",
                context={"artifact": relative},
            )
        return self.output_root.joinpath(*rel.parts)

    def write(self, documents: Iterable[CompiledDocument], *, dry_run: bool = False) -> List[ArtifactResult]:
        """Write ``documents`` in order and return one result per artifact.

        ``documents`` is consumed lazily: an error raised while producing the
        next document is recorded against that artifact and ends the run, as
        does a filesystem error while writing. With ``dry_run`` the documents
        are produced but nothing on disk changes.
        """
        results: List[ArtifactResult] = []
        if not dry_run:
            try:
                self.reset()
            except OutputWriteError as exc:
                results.append(ArtifactResult(exc.context.get("artifact", ""), ok=False, error=str(exc)))
                return results

        iterator: Iterator[CompiledDocument] = iter(documents)
        while True:
            try:
                document = next(iterator)
            except StopIteration:
                break
            except PromptsmithError as exc:
                logger.error("Failed to compile %s: %s", exc.context.get("artifact", "?"), exc)
                results.append(
                    ArtifactResult(
                        target_path=exc.context.get("artifact", ""),
                        ok=False,
                        error=str(exc),
                        kind=exc.context.get("kind", ""),
                        source_name=exc.context.get("source", ""),
                    )
                )
                break

            try:
                if not dry_run:
                    write_text(self.target(document.target_path), document.rendered_text)
            except (OSError, OutputWriteError) as exc:
                logger.error("Failed to write %s: %s", document.target_path, exc)
                results.append(
                    ArtifactResult(
                        target_path=document.target_path,
                        ok=False,
                        error=str(exc),
                        kind=document.kind,
                        source_name=document.source_name,
                    )
                )
                break

            logger.debug("Wrote %s", document.target_path)
            results.append(
                ArtifactResult(
                    target_path=document.target_path,
                    ok=True,
                    kind=document.kind,
                    source_name=document.source_name,
                )
            )
        return results


__all__ = ["CompiledDocument", "DocumentKind", "OutputWriter"]
