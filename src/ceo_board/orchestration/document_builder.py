"""Render the CEO prompt: the original question plus every board response.

The document is XML. Every value coming from outside (the question, model
identifiers, responses, failure markers) goes through ``neutralize`` or
``neutralize_attribute`` at the point it is appended, so no response can
open, close or forge an element.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from io import StringIO
from xml.sax.saxutils import escape, quoteattr

from ceo_board.domain import ArbitrationDocument, WorkerResult

ROOT_ELEMENT = "ceo-prompt"

CEO_PURPOSE = (
    "You are the CEO of a company. You are given the original question and a list of "
    "responses from your board of directors, one per board member. Take in the question "
    "and every board response, then choose the best direction for the company."
)

CEO_INSTRUCTIONS: tuple[str, ...] = (
    "Each board response answers the original question.",
    "Each board response comes from a different model and they appear in the same order "
    "as the board was listed.",
    "A board response with status failed carries a failure marker instead of an answer; "
    "do not treat it as an opinion.",
    "Think step by step about the pros and cons of each response.",
    "Choose the best direction for the company and explain the reason for it.",
    "Respond in markdown format.",
)

# Characters that XML 1.0 forbids outright; they cannot be escaped, only replaced.
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff\ud800-\udfff]")

# Carriage returns are escaped so parsers do not normalise them away.
_TEXT_ENTITIES = {'"': "&quot;", "'": "&apos;", "\r": "&#13;"}


def _xml_safe(value: str) -> str:
    return _INVALID_XML_CHARS.sub("\ufffd", value)


def neutralize(value: str) -> str:
    return escape(_xml_safe(value), _TEXT_ENTITIES)


def neutralize_attribute(value: str) -> str:
    return quoteattr(_xml_safe(value), {"\r": "&#13;", "\n": "&#10;", "\t": "&#9;"})


class ArbitrationDocumentBuilder:
    def __init__(self) -> None:
        self._buffer = StringIO()

    def _append(self, *parts: str) -> None:
        for part in parts:
            self._buffer.write(part)

    def open(self, element: str, **attributes: str) -> None:
        rendered = "".join(
            f" {name.replace('_', '-')}={neutralize_attribute(value)}"
            for name, value in attributes.items()
        )
        self._append("<", element, rendered, ">")

    def close(self, element: str) -> None:
        self._append("</", element, ">\n")

    def text_element(self, element: str, value: str) -> None:
        self._append("<", element, ">", neutralize(value), "</", element, ">\n")

    def newline(self) -> None:
        self._append("\n")

    def add_purpose(self, purpose: str) -> None:
        self.text_element("purpose", purpose)

    def add_instructions(self, instructions: Iterable[str]) -> None:
        self.open("instructions")
        self.newline()
        for instruction in instructions:
            self.text_element("instruction", instruction)
        self.close("instructions")

    def add_question(self, prompt: str) -> None:
        self.text_element("original-question", prompt)

    def add_board(self, results: Sequence[WorkerResult]) -> None:
        self.open("board-decisions", count=str(len(results)))
        self.newline()
        for position, result in enumerate(results, start=1):
            self.open(
                "board-response",
                position=str(position),
                status="answered" if result.ok else "failed",
            )
            self.newline()
            self.text_element("model-name", result.model)
            self.text_element("model-response", result.text)
            self.close("board-response")
        self.close("board-decisions")

    def render(self) -> str:
        return self._buffer.getvalue()


def build_arbitration_document(
    prompt: str,
    results: Sequence[WorkerResult],
    *,
    purpose: str = CEO_PURPOSE,
    instructions: Sequence[str] = CEO_INSTRUCTIONS,
) -> ArbitrationDocument:
    builder = ArbitrationDocumentBuilder()
    builder.open(ROOT_ELEMENT)
    builder.newline()
    builder.add_purpose(purpose)
    builder.add_instructions(instructions)
    builder.add_question(prompt)
    builder.add_board(results)
    builder.close(ROOT_ELEMENT)
    return ArbitrationDocument(prompt=prompt, results=tuple(results), rendered=builder.render())
