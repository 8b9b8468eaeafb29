"""Unit tests for scout task and result models."""

from web_scout.scout.models import RunStatus, ScoutRunResult, ScoutTask, ScoutUsage


def test_task_flags():
    assert ScoutTask("t").has_urls is False
    assert ScoutTask("t", query="   ").has_query is False
    assert ScoutTask("t", urls=["https://a.test"], query="q").has_query is True


def test_usage_summary():
    usage = ScoutUsage(input_tokens=1200, output_tokens=300, cost_total=0.01234,
                       turn_count=3, model_used=None)
    assert usage.summary("claude-haiku-4-5") == "3 turns | ↑1200 ↓300 | $0.0123 | claude-haiku-4-5"
    usage.model_used = "gpt-4.1-mini"
    assert usage.summary("ignored").endswith("gpt-4.1-mini")


def test_failure_text_prefers_stderr():
    result = ScoutRunResult(exit_code=1, final_output_text="partial",
                            stderr_text="  rate limited\n", status=RunStatus.FAILED)
    assert result.failure_text() == "rate limited"
    result.stderr_text = ""
    assert result.failure_text() == "partial"
    assert result.ok is False
