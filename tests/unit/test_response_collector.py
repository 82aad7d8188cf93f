from pathlib import Path

from ceo_board.domain import DispatchOutcome
from ceo_board.orchestration.collector import collect_worker_results

MODELS = ["openai:gpt-4o", "anthropic:claude-3-5-haiku", "gemini:gemini-2.0-flash"]


def _answer(tmp_path: Path, model: str, text: str) -> DispatchOutcome:
    path = tmp_path / f"{model.replace(':', '_')}.md"
    path.write_text(text, encoding="utf-8")
    return DispatchOutcome.succeeded(model, path)


def test_collects_one_result_per_requested_model(tmp_path: Path) -> None:
    outcomes = [
        _answer(tmp_path, MODELS[0], "Expand now."),
        DispatchOutcome.failed(MODELS[1], "timed out after 120s"),
        _answer(tmp_path, MODELS[2], "Wait a quarter."),
    ]

    collection = collect_worker_results(MODELS, outcomes)

    assert [result.model for result in collection.results] == MODELS
    assert collection.results[0].response == "Expand now."
    assert collection.results[1].failure == (
        "anthropic:claude-3-5-haiku failed to respond: timed out after 120s"
    )
    assert collection.results[2].response == "Wait a quarter."
    assert (collection.answered, collection.failed) == (2, 1)
    assert collection.diagnostics == ()


def test_all_failures_still_yield_full_length(tmp_path: Path) -> None:
    outcomes = [DispatchOutcome.failed(model, "boom") for model in MODELS]

    collection = collect_worker_results(MODELS, outcomes)

    assert len(collection.results) == len(MODELS)
    assert not any(result.ok for result in collection.results)


def test_fewer_outcomes_than_models_truncates_with_diagnostic(tmp_path: Path) -> None:
    outcomes = [_answer(tmp_path, MODELS[0], "Expand now."), _answer(tmp_path, MODELS[1], "No.")]

    collection = collect_worker_results(MODELS, outcomes)

    assert [result.model for result in collection.results] == MODELS[:2]
    assert len(collection.diagnostics) == 1
    assert "returned 2 result(s) for 3 requested model(s)" in collection.diagnostics[0]


def test_more_outcomes_than_models_truncates_with_diagnostic(tmp_path: Path) -> None:
    outcomes = [_answer(tmp_path, model, "ok") for model in MODELS]

    collection = collect_worker_results(MODELS[:1], outcomes)

    assert [result.model for result in collection.results] == MODELS[:1]
    assert "truncated to 1" in collection.diagnostics[0]


def test_missing_response_file_becomes_failure_marker(tmp_path: Path) -> None:
    outcome = DispatchOutcome.succeeded(MODELS[0], tmp_path / "vanished.md")

    collection = collect_worker_results(MODELS[:1], [outcome])

    result = collection.results[0]
    assert not result.ok
    assert result.text.startswith("openai:gpt-4o failed to respond: could not read response file")


def test_blank_response_becomes_failure_marker(tmp_path: Path) -> None:
    collection = collect_worker_results(MODELS[:1], [_answer(tmp_path, MODELS[0], "  \n ")])

    assert collection.results[0].failure == "openai:gpt-4o failed to respond: empty response"


def test_mismatched_model_identity_is_reported(tmp_path: Path) -> None:
    outcome = _answer(tmp_path, "groq:llama3", "hello")

    collection = collect_worker_results(MODELS[:1], [outcome])

    assert collection.results[0].model == MODELS[0]
    assert "expected 'openai:gpt-4o'" in collection.diagnostics[0]
