from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ceo_board.domain.arbitration_document import ArbitrationDocument


@dataclass(slots=True, frozen=True)
class Decision:
    ceo_model: str
    text: str
    document: ArbitrationDocument

    def render(self, *, source_name: str) -> str:
        return (
            "# CEO Decision\n\n"
            f"- Arbiter: `{self.ceo_model}`\n"
            f"- Source: `{source_name}` (sha256 {self.document.document_hash})\n"
            f"- Board: {', '.join(f'`{model}`' for model in self.document.models)}\n\n"
            f"{self.text.strip()}\n"
        )


@dataclass(slots=True, frozen=True)
class Artifacts:
    arbitration_document: Path
    decision: Path

    def as_dict(self) -> dict[str, str]:
        return {
            "arbitration_document": str(self.arbitration_document),
            "decision": str(self.decision),
        }
