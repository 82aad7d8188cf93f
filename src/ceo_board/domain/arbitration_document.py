from __future__ import annotations

import hashlib
from dataclasses import dataclass

from ceo_board.domain.worker_result import WorkerResult


@dataclass(slots=True, frozen=True)
class ArbitrationDocument:
    prompt: str
    results: tuple[WorkerResult, ...]
    rendered: str

    @property
    def document_hash(self) -> str:
        return hashlib.sha256(self.rendered.encode("utf-8")).hexdigest()

    @property
    def models(self) -> tuple[str, ...]:
        return tuple(result.model for result in self.results)
