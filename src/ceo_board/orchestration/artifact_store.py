from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ceo_board.domain import (
    DEFAULT_ARBITRATION_DOCUMENT_NAME,
    DEFAULT_DECISION_DOCUMENT_NAME,
    ArbitrationDocument,
    Artifacts,
    Decision,
)
from ceo_board.errors import PersistenceError
from ceo_board.observability.logging import get_logger


@dataclass(slots=True, frozen=True)
class ArtifactStore:
    """Write the arbitration document and the decision into ``output_dir``.

    Both files are staged as hidden temporaries next to their targets and only
    published once both have been written, so readers never see a
    half-written artifact. If publishing the second file fails, the first is
    withdrawn and any artifact it replaced is restored. Existing artifacts are
    left alone unless ``overwrite`` is set, including ones that appear while
    the store is writing.
    """

    output_dir: Path
    arbitration_name: str = DEFAULT_ARBITRATION_DOCUMENT_NAME
    decision_name: str = DEFAULT_DECISION_DOCUMENT_NAME
    overwrite: bool = False

    def persist(self, document: ArbitrationDocument, decision: Decision) -> Artifacts:
        arbitration_path = self.output_dir / self.arbitration_name
        decision_path = self.output_dir / self.decision_name
        contents = (
            (arbitration_path, document.rendered),
            (decision_path, decision.render(source_name=self.arbitration_name)),
        )

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                f"cannot create output directory {self.output_dir}: {exc}"
            ) from exc

        directories = [str(path) for path, _ in contents if path.is_dir()]
        if directories:
            raise PersistenceError(f"artifact path is a directory: {', '.join(directories)}")
        if not self.overwrite:
            existing = [str(path) for path, _ in contents if path.exists()]
            if existing:
                raise PersistenceError(f"refusing to overwrite existing artifacts: {', '.join(existing)}")

        staged: list[tuple[Path, Path]] = []
        set_aside: dict[Path, Path] = {}
        published: list[Path] = []
        try:
            for target, text in contents:
                staged.append((self._stage(target, text), target))
            for temporary, target in staged:
                if self.overwrite:
                    if target.exists():
                        set_aside[target] = self._set_aside(target)
                    os.replace(temporary, target)
                else:
                    # link refuses an existing target, unlike replace
                    os.link(temporary, target)
                published.append(target)
        except FileExistsError as exc:
            self._roll_back(published, set_aside)
            conflict = exc.filename2 or exc.filename
            raise PersistenceError(f"refusing to overwrite existing artifacts: {conflict}") from exc
        except OSError as exc:
            self._roll_back(published, set_aside)
            raise PersistenceError(f"cannot write artifacts to {self.output_dir}: {exc}") from exc
        finally:
            for temporary, _ in staged:
                temporary.unlink(missing_ok=True)

        logger = get_logger("artifact_store")
        for backup in set_aside.values():
            try:
                backup.unlink()
            except OSError as exc:
                logger.warning("artifact_backup_left", path=str(backup), error=str(exc))

        artifacts = Artifacts(arbitration_document=arbitration_path, decision=decision_path)
        logger.info("artifacts_persisted", **artifacts.as_dict())
        return artifacts

    def _stage(self, target: Path, text: str) -> Path:
        fd, raw_path = tempfile.mkstemp(dir=self.output_dir, prefix=f".{target.name}.", suffix=".tmp")
        temporary = Path(raw_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
        except OSError:
            temporary.unlink(missing_ok=True)
            raise
        return temporary

    def _set_aside(self, target: Path) -> Path:
        fd, raw_path = tempfile.mkstemp(dir=self.output_dir, prefix=f".{target.name}.", suffix=".bak")
        os.close(fd)
        backup = Path(raw_path)
        try:
            os.replace(target, backup)
        except OSError:
            backup.unlink(missing_ok=True)
            raise
        return backup

    def _roll_back(self, published: list[Path], set_aside: dict[Path, Path]) -> None:
        """Undo a partial publish: drop new artifacts, then restore the previous ones."""
        logger = get_logger("artifact_store")
        for target in reversed(published):
            try:
                target.unlink(missing_ok=True)
            except OSError as exc:
                logger.error("artifact_rollback_failed", path=str(target), error=str(exc))
        for target, backup in set_aside.items():
            try:
                os.replace(backup, target)
            except OSError as exc:
                logger.error("artifact_rollback_failed", path=str(target), error=str(exc))
