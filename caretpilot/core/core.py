import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .context import extract_context_with_marker
from .idle import IdleDetector

logger = logging.getLogger(__name__)


class AutocompleteCore:
    """
    Platform-agnostic glue between a host editor, the suggestion client and a
    renderer. The host calls `on_text_changed()` for every edit and
    `request_suggestion(...)` whenever it wants to probe for idleness (e.g. on
    the next keystroke or a UI tick).

    The renderer is any object with `show_suggestion(text)` and `hide()`.
    """

    def __init__(self, llm_client, renderer, idle_detector=None, executor=None):
        """
        :param llm_client:    A SuggestionClient (core/llm_client.py)
        :param renderer:      Suggestion display collaborator
        :param idle_detector: An IdleDetector (core/idle.py); one is created if omitted
        :param executor:      Background worker; defaults to a single-thread pool
        """
        self.llm_client = llm_client
        self.renderer = renderer
        self.idle = idle_detector or IdleDetector()
        # Only an executor created here is shut down by close()
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="caretpilot")

        # Bumped on every edit; results from an older generation are not rendered
        self._generation = 0
        self._lock = threading.Lock()
        self.last_future = None

    def on_text_changed(self):
        """Called by the host whenever the document changes."""
        with self._lock:
            self._generation += 1
        self.idle.notify()

    def request_suggestion(self, document, caret_offset, read_lock=None):
        """
        If the idle flag is raised, extract the context window and fetch a
        suggestion in the background.

        :return: True if a fetch was dispatched, False otherwise.
        """
        if not self.idle.poll_and_reset():
            return False

        context = extract_context_with_marker(document, caret_offset, read_lock=read_lock)
        with self._lock:
            generation = self._generation
        logger.debug("Dispatching fetch for generation %d", generation)
        self.last_future = self.executor.submit(self._run_fetch, context, generation)
        return True

    def _run_fetch(self, context, generation):
        try:
            suggestions = self.llm_client.get_suggestions(context)

            with self._lock:
                stale = generation != self._generation
            if stale:
                logger.info("Dropping suggestion for superseded edit (generation %d)", generation)
                return None

            if suggestions:
                self.renderer.show_suggestion(suggestions[0])
                return suggestions[0]
            self.renderer.hide()
        except Exception:
            logger.exception("Suggestion fetch failed")
            self.renderer.hide()
        return None

    def close(self):
        """Stop the worker, drop the pending idle timer and release the client."""
        self.idle.cancel()
        if self._owns_executor:
            self.executor.shutdown(wait=True)
        self.llm_client.close()
