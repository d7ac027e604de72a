import asyncio
import logging
from collections.abc import Mapping

from videoenhancer.config import DEBOUNCE_DELAY
from videoenhancer.document import is_or_contains_video
from videoenhancer.filters import VideoFilters
from videoenhancer.graph_cache import FilterGraphApplier
from videoenhancer.presets import default_config, merge_presets, resolve_active_preset
from videoenhancer.style import StyleInjector

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs fn once, delay seconds after the most recent call."""

    def __init__(self, fn, delay, loop=None):
        self.fn = fn
        self.delay = delay
        self.loop = loop
        self._handle = None

    @property
    def pending(self):
        return self._handle is not None

    def __call__(self, *args):
        loop = self.loop or asyncio.get_running_loop()
        self.cancel()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def _fire(self, args):
        self._handle = None
        self.fn(*args)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class EnhancerController:
    """
    Keeps the page filters in line with the stored settings.
    Reloads on start, on every change to the "local" store area and, debounced,
    whenever a video element shows up in the page.
    """

    def __init__(self, store, document, delay=DEBOUNCE_DELAY):
        self.store = store
        self.document = document
        self.styles = StyleInjector(document)
        self.graphs = FilterGraphApplier(document, on_ready_reload=self.schedule_reload)
        self.debounced_reload = Debouncer(self.schedule_reload, delay)
        self.is_initialized = False
        self._loop = None
        self._tasks = set()
        self._generation = 0

    async def load_and_apply(self):
        # Reads may finish out of order; only the most recently started one applies
        self._generation += 1
        generation = self._generation
        try:
            data = await self.store.get(None)
        except Exception as e:
            logger.error(f"[Video Enhancer] loadAndApplySettings: {e}")
            data = default_config()
        if generation != self._generation:
            logger.debug("[Video Enhancer] Newer reload pending, stale settings skipped")
            return
        self.apply_settings(data)

    def apply_settings(self, data):
        try:
            if not isinstance(data, Mapping) or data.get("enabled") is False:
                self.remove_filters()
                return

            values = resolve_active_preset(
                {"activePreset": data.get("activePreset"), "presets": merge_presets(data.get("presets"))}
            )
            graph_id = self.graphs.update_graph(*VideoFilters.get_graph_inputs(values))
            self.styles.apply_filter_value(VideoFilters.build_filter_string(values, graph_id))
            self.is_initialized = True
        except Exception as e:
            logger.error(f"[Video Enhancer] applyFilters: {e}")

    def remove_filters(self):
        self.styles.remove()
        self.graphs.remove()

    def schedule_reload(self):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("[Video Enhancer] No event loop, reload skipped")
            return None

        task = loop.create_task(self.load_and_apply())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def on_storage_changed(self, changes, area):
        if area == "local":
            self.schedule_reload()

    def on_nodes_added(self, nodes):
        for node in nodes:
            if is_or_contains_video(node):
                self.debounced_reload()
                return

    def start_observing(self):
        if self.document.body is not None:
            self.document.observe(self.on_nodes_added)
        else:
            self.document.when_ready(self.start_observing)

    async def start(self):
        self._loop = asyncio.get_running_loop()
        self.debounced_reload.loop = self._loop
        self.store.add_listener(self.on_storage_changed)
        self.start_observing()
        await self.load_and_apply()

    async def wait_idle(self):
        """Waits for reloads already scheduled to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def stop(self):
        self.store.remove_listener(self.on_storage_changed)
        self.document.disconnect(self.on_nodes_added)
        self.debounced_reload.cancel()
        for task in list(self._tasks):
            task.cancel()
