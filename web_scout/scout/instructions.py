"""Scout instructions: model choice, tool grant and prompt text."""

from typing import Dict, List, Optional

from web_scout.scout.models import ScoutTask
from web_scout.utils.config import settings

FETCH_TOOL = "fetch_url"
SEARCH_TOOL = "web_search"

# Small, cheap model per host provider family.  Good enough for
# fetch-and-summarise work; callers can still override per call.
SCOUT_MODELS: Dict[str, str] = {
    "anthropic": "claude-haiku-4-5",
    "openai": "gpt-4.1-mini",
    "google": "gemini-2.0-flash",
    "groq": "llama-3.3-70b-versatile",
    "cerebras": "llama-3.3-70b",
    "xai": "grok-3-mini-fast",
    "mistral": "mistral-small-latest",
    "openrouter": "anthropic/claude-haiku-4-5",
}

OUTPUT_RULES = """Output rules:
- Be concise -- the caller has limited context
- Use bullet points and headers for scannability
- Include specific code examples, API signatures, or config when relevant
- Quote exact values (version numbers, URLs, commands) -- don't paraphrase technical details
- If content is too long, prioritize the most relevant sections"""


def resolve_scout_model(
    model_override: Optional[str], active_provider: Optional[str]
) -> str:
    """Explicit override, then the host provider's small model, then the default."""
    if model_override:
        return model_override
    if active_provider and active_provider in SCOUT_MODELS:
        return SCOUT_MODELS[active_provider]
    return settings.scout_default_model


def scout_tool_names(search_available: bool) -> List[str]:
    tools = [FETCH_TOOL]
    if search_available:
        tools.append(SEARCH_TOOL)
    return tools


def build_system_prompt(
    task: ScoutTask,
    search_available: bool,
    provider_name: Optional[str] = None,
) -> str:
    """Numbered workflow naming exactly the tools the scout may use."""
    tool_list = ", ".join(scout_tool_names(search_available))
    lines = [
        f"You are a web research specialist. You have these tools: {tool_list}.",
        "",
        "Your workflow:",
    ]

    step = 1
    if task.has_query and search_available:
        via = f" (provider: {provider_name})" if provider_name else ""
        lines.append(f"{step}. Use {SEARCH_TOOL} to search for: the query given in the task{via}")
        lines.append(f"{step + 1}. Pick the most relevant results (usually 2-4)")
        lines.append(f"{step + 2}. Use {FETCH_TOOL} to read the full content of those pages")
        step += 3
    if task.has_urls:
        lines.append(f"{step}. Use {FETCH_TOOL} to retrieve content from each URL provided in the task")

    lines += [
        "",
        "Then:",
        "- Analyze all the content you've gathered",
        "- Return ONLY the information relevant to the research task",
        "- Discard everything else (navigation, ads, boilerplate, tangential info)",
        "",
        OUTPUT_RULES,
    ]
    return "\n".join(lines)


def build_task_text(task: ScoutTask) -> str:
    text = f"Research task: {task.task_description}"
    if task.has_urls:
        url_list = "\n".join(f"  {i}. {url}" for i, url in enumerate(task.urls, 1))
        text += f"\n\nURLs to read:\n{url_list}"
    if task.has_query:
        text += f"\n\nSearch query: {task.query}"
    return text
