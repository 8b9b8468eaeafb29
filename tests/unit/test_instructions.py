"""Unit tests for scout model choice and prompt construction."""

from web_scout.scout.instructions import (
    FETCH_TOOL,
    SCOUT_MODELS,
    SEARCH_TOOL,
    build_system_prompt,
    build_task_text,
    resolve_scout_model,
    scout_tool_names,
)
from web_scout.scout.models import ScoutTask
from web_scout.utils.config import settings


class TestResolveScoutModel:
    def test_override_wins(self):
        assert resolve_scout_model("gpt-4o", "anthropic") == "gpt-4o"

    def test_provider_family(self):
        assert resolve_scout_model(None, "openai") == SCOUT_MODELS["openai"]
        assert resolve_scout_model(None, "google") == "gemini-2.0-flash"

    def test_unknown_family_uses_default(self):
        assert resolve_scout_model(None, "acme") == settings.scout_default_model
        assert resolve_scout_model(None, None) == settings.scout_default_model


def test_tool_names():
    assert scout_tool_names(False) == [FETCH_TOOL]
    assert scout_tool_names(True) == [FETCH_TOOL, SEARCH_TOOL]


class TestSystemPrompt:
    def test_urls_only(self):
        task = ScoutTask("Summarise the API", urls=["https://a.test"])
        prompt = build_system_prompt(task, search_available=False)
        assert "You have these tools: fetch_url." in prompt
        assert SEARCH_TOOL not in prompt
        assert "1. Use fetch_url to retrieve content from each URL" in prompt

    def test_query_with_search(self):
        task = ScoutTask("Compare clients", query="python http clients")
        prompt = build_system_prompt(task, search_available=True, provider_name="brave")
        assert "fetch_url, web_search" in prompt
        assert "1. Use web_search" in prompt
        assert "(provider: brave)" in prompt
        assert "3. Use fetch_url to read the full content" in prompt

    def test_query_and_urls_numbering(self):
        task = ScoutTask("Both", urls=["https://a.test"], query="q")
        prompt = build_system_prompt(task, search_available=True)
        assert "4. Use fetch_url to retrieve content from each URL" in prompt

    def test_output_rules_present(self):
        prompt = build_system_prompt(ScoutTask("t", urls=["https://a.test"]), False)
        assert "Output rules:" in prompt
        assert "Be concise" in prompt


class TestTaskText:
    def test_full(self):
        task = ScoutTask("Find the rate limits", urls=["https://a.test", "https://b.test"],
                         query="api rate limits")
        text = build_task_text(task)
        assert text.startswith("Research task: Find the rate limits")
        assert "URLs to read:\n  1. https://a.test\n  2. https://b.test" in text
        assert text.endswith("Search query: api rate limits")

    def test_description_only(self):
        assert build_task_text(ScoutTask("Just this")) == "Research task: Just this"
