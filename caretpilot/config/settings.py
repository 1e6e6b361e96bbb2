"""Configuration values for caretpilot."""

import os

# Time in seconds to wait after the last edit before the idle flag is raised
IDLE_DELAY = 0.3

# Lines of context taken above and below the caret's line
CONTEXT_LINES = 10

# Token inserted at the caret position inside the context window
CARET_MARKER = "<CARET>"

# Chat-completion endpoint and model (can be overridden in environment or passed to SuggestionClient)
LLM_ENDPOINT = os.environ.get("CARETPILOT_ENDPOINT", "https://api.openai.com/v1/chat/completions")
LLM_MODEL = os.environ.get("CARETPILOT_MODEL", "gpt-4o")

# Sampling parameters sent with every request
MAX_TOKENS = 32
TEMPERATURE = 0.7

# Maximum number of characters from the context to send (prefix + suffix total)
MAX_PROMPT_CHARS = 2300

# HTTP timeouts in seconds; requests has no write timeout, so it shares the read budget
CONNECT_TIMEOUT = 10
READ_TIMEOUT = 30

# Connections kept alive per client instance
POOL_MAXSIZE = 5

# Suggestion returned when no API key is configured
NO_KEY_PLACEHOLDER = "// NO KEY FOUND"

# Where credentials are looked up
API_KEY_ENV = "OPENAI_API_KEY"
CREDENTIALS_FILE = os.path.join(os.path.expanduser("~"), ".config", "caretpilot", "credentials.json")
