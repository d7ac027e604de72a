import logging
from dataclasses import dataclass

from videoenhancer.filter_library import build_filter_graph, filter_id_for, needs_graph, normalize_inputs
from videoenhancer.svg import graph_to_svg

logger = logging.getLogger(__name__)

SVG_CONTAINER_ID = "video-enhancer-svg-container"
CONTAINER_STYLE = "position:absolute;width:0;height:0;overflow:hidden;pointer-events:none;visibility:hidden;"


@dataclass(frozen=True)
class FilterState:
    sharpness: int | None = None
    warmth: float | None = None
    warmth_mode: str | None = None
    filter_id: str | None = None

    def matches(self, sharpness, warmth, warmth_mode):
        return (self.sharpness, self.warmth, self.warmth_mode) == (sharpness, warmth, warmth_mode)


# Nothing applied yet, or everything removed
CLEARED_STATE = FilterState()
# Filters active but no graph needed
EMPTY_STATE = FilterState(sharpness=0, warmth=0, warmth_mode=None, filter_id=None)


class FilterGraphApplier:
    """
    Owns the hidden SVG container and the record of what it currently holds.
    Regenerates the graph only when the normalized inputs change.
    """

    def __init__(self, document, state=None, on_ready_reload=None):
        self.document = document
        self._state = state or CLEARED_STATE
        self.on_ready_reload = on_ready_reload
        # Latest triple waiting for the page body; one ready callback serves all of them
        self._pending = None
        self._waiting_for_body = False

    @property
    def state(self):
        return self._state

    def update_graph(self, sharpness, warmth, warmth_mode=None):
        try:
            return self._update_graph(sharpness, warmth, warmth_mode)
        except Exception as e:
            logger.error(f"[Video Enhancer] updateGraph: {e}")
            return None

    def _update_graph(self, sharpness, warmth, warmth_mode):
        sharpness, warmth, warmth_mode = normalize_inputs(sharpness, warmth, warmth_mode)

        if self._state.matches(sharpness, warmth, warmth_mode):
            return self._state.filter_id

        container = self.document.get_element_by_id(SVG_CONTAINER_ID)

        if not needs_graph(sharpness, warmth):
            if container is not None:
                self.document.remove_element(container)
            self._pending = None
            self._state = EMPTY_STATE
            return None

        if self.document.body is None:
            logger.debug("[Video Enhancer] Document body not ready, deferring filter graph")
            if not self._waiting_for_body:
                self._waiting_for_body = True
                self.document.when_ready(self._retry_when_ready)
            self._pending = (sharpness, warmth, warmth_mode)
            return None

        if container is None:
            container = self.document.create_element(
                "div", {"id": SVG_CONTAINER_ID, "style": CONTAINER_STYLE}
            )
            self.document.append_child(self.document.body, container)

        filter_id = filter_id_for(sharpness, warmth, warmth_mode)
        graph = build_filter_graph(sharpness, warmth, warmth_mode, filter_id=filter_id)
        self.document.replace_children(container, graph_to_svg(graph))

        self._state = FilterState(sharpness, warmth, warmth_mode, filter_id)
        return filter_id

    def _retry_when_ready(self):
        self._waiting_for_body = False
        pending, self._pending = self._pending, None
        if pending is not None:
            self.update_graph(*pending)
        if self.on_ready_reload is not None:
            self.on_ready_reload()

    def remove(self):
        container = self.document.get_element_by_id(SVG_CONTAINER_ID)
        if container is not None:
            self.document.remove_element(container)
        self._pending = None
        self._state = CLEARED_STATE
