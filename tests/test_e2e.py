"""Live calls against the real endpoint; skipped unless OPENAI_API_KEY is set."""

import os

import pytest

from caretpilot.core.credentials import EnvCredentialStore
from caretpilot.core.llm_client import SuggestionClient

pytestmark = pytest.mark.skipif(
    not os.environ.get("OPENAI_API_KEY", "").strip(),
    reason="OPENAI_API_KEY not set; skipping E2E tests.",
)


def assert_balanced(s):
    for opening, closing in ("{}", "()", "[]"):
        assert s.count(opening) == s.count(closing), f"Mismatched {opening!r} vs {closing!r} in: {s}"


def test_unclosed_for_loop_completes_properly():
    context = (
        "public class LoopTest {\n"
        "    public void iterate() {\n"
        "\n"
        "        for (int i = 0; i < 5; i++)<CARET>\n"
        "\n"
        "    }\n"
        "}"
    )
    with SuggestionClient(credentials=EnvCredentialStore()) as client:
        suggestions = client.get_suggestions(context)

    assert len(suggestions) == 1
    assert "{" in suggestions[0] and "}" in suggestions[0]
    assert_balanced(suggestions[0])


def test_single_letter_trigger_does_not_duplicate():
    context = (
        "public class SimpleTest {\n"
        "    public static void main(String[] args) {\n"
        "        S<CARET>\n"
        "    }\n"
        "}"
    )
    with SuggestionClient(credentials=EnvCredentialStore()) as client:
        suggestions = client.get_suggestions(context)

    assert len(suggestions) == 1
    assert not suggestions[0].startswith("S")
    assert_balanced(suggestions[0])
