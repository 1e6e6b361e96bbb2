"""
llm_client.py

Sends a caret-marked context window to a chat-completions endpoint and
returns zero or one suggestion strings.
"""

import logging

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from ..config import settings
from .credentials import EnvCredentialStore
from .prompts import SYSTEM_PROMPT
from .wire import ChatMessage, ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

FENCE = "```"


def truncate_prompt(context, max_chars):
    """Keep the trailing `max_chars` characters of `context`."""
    if len(context) > max_chars:
        return context[len(context) - max_chars:]
    return context


def strip_code_fences(text):
    """
    Strip leading/trailing Markdown fences from the model's text.

    An opening fence line (e.g. ```python) is dropped whole; everything from
    the last remaining fence onward is dropped.
    """
    if text.startswith(FENCE):
        newline = text.find("\n")
        if 0 <= newline < len(text) - 1:
            text = text[newline + 1:]
    last_fence = text.rfind(FENCE)
    if last_fence >= 0:
        text = text[:last_fence].rstrip()
    return text.strip()


class SuggestionClient:
    """
    Client for obtaining a single code continuation from a chat-completion service.

    Owns one pooled `requests.Session` for its lifetime and a single-slot cache
    holding the last (prompt, suggestion) pair. Release the pool with `close()`
    or by using the client as a context manager.

    `get_suggestions` blocks on the network; run it off any UI thread.
    """

    def __init__(self, credentials=None, endpoint=None, model=None, session=None,
                 max_prompt_chars=None, timeout=None):
        """
        :param credentials:      CredentialStore supplying the API key. Defaults to the environment.
        :param endpoint:         Optional override for the chat-completions URL.
        :param model:            Optional override for the model id.
        :param session:          Preconfigured requests.Session (tests inject a mock here).
        :param max_prompt_chars: Optional override for the truncation limit.
        :param timeout:          (connect, read) timeout tuple in seconds.
        """
        self.credentials = credentials or EnvCredentialStore()
        self.endpoint = endpoint or getattr(settings, "LLM_ENDPOINT", None)
        self.model = model or getattr(settings, "LLM_MODEL", "gpt-4o")
        self.max_prompt_chars = max_prompt_chars or getattr(settings, "MAX_PROMPT_CHARS", 2300)
        self.timeout = timeout or (
            getattr(settings, "CONNECT_TIMEOUT", 10),
            getattr(settings, "READ_TIMEOUT", 30),
        )
        self.session = session if session is not None else self._build_session()

        # Single slot: (prompt, suggestion) of the last completed fetch, replaced in one assignment
        self._cache = None

    @property
    def last_prompt(self):
        return self._cache[0] if self._cache else None

    @property
    def last_suggestion(self):
        return self._cache[1] if self._cache else None

    @staticmethod
    def _build_session():
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=getattr(settings, "POOL_MAXSIZE", 5))
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def get_suggestions(self, context):
        """
        Map a context window to zero or one suggestions.

        :param context: Caret-marked window text.
        :return: [] for no suggestion or a failed call, otherwise [suggestion].
        """
        logger.info("get_suggestions() called with context length=%d", len(context))

        prompt = truncate_prompt(context, self.max_prompt_chars)
        if len(context) > self.max_prompt_chars:
            logger.debug("Context truncated to last %d chars", self.max_prompt_chars)

        # Identical prompt: answer from the cache without touching the network
        cached = self._cache
        if cached is not None and cached[0] == prompt:
            logger.info("Prompt matches last prompt; returning cached suggestion")
            return [cached[1]] if cached[1] else []

        api_key = (self.credentials.get_api_key() or "").strip()
        logger.debug("Read API key from credential store; length=%d", len(api_key))
        if not api_key:
            logger.warning("No API key found; returning placeholder")
            return [getattr(settings, "NO_KEY_PLACEHOLDER", "// NO KEY FOUND")]

        body = self._build_request(prompt).model_dump_json()
        logger.debug("Payload JSON: %s", body)

        try:
            response = self._post(api_key, body)
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.error("LLM request failed: %s", e)
            return []

        choice_text = response.first_text()
        logger.debug("Raw choice text: %s", choice_text)

        stripped = strip_code_fences(choice_text)
        logger.info("Stripped suggestion text: %s", stripped)

        self._cache = (prompt, stripped)
        if not stripped:
            logger.warning("Stripped suggestion is blank; returning empty list")
            return []
        return [stripped]

    def _build_request(self, prompt):
        return ChatRequest(
            model=self.model,
            messages=[
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=prompt),
            ],
            max_tokens=getattr(settings, "MAX_TOKENS", 32),
            n=1,
            temperature=getattr(settings, "TEMPERATURE", 0.7),
        )

    def _post(self, api_key, body):
        """POST the JSON body; raises requests.HTTPError on a non-2xx status."""
        logger.info("Sending HTTP request to %s", self.endpoint)
        response = self.session.post(
            self.endpoint,
            data=body.encode("utf-8"),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )
        with response:
            logger.debug("Received HTTP response code=%s", response.status_code)
            response.raise_for_status()  # Raises an HTTPError if the status is 4xx, 5xx
            return ChatResponse.model_validate_json(response.text)

    def close(self):
        """Release the pooled connections."""
        logger.info("Closing HTTP session")
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
