"""
Minimal page document the enhancer drives.

Elements are xml.etree elements, so filter graphs serialized by
videoenhancer.svg can be placed into the tree as-is. The body does not
exist until the document is marked ready, like a page still loading.
"""

import logging
import xml.etree.ElementTree as ET

logger = logging.getLogger(__name__)


def is_or_contains_video(node):
    if not isinstance(node, ET.Element) or not isinstance(node.tag, str):
        return False
    if node.tag.lower() == "video":
        return True
    return any(isinstance(el.tag, str) and el.tag.lower() == "video" for el in node.iter())


class PageDocument:
    def __init__(self, ready=False, with_head=True):
        self.root = ET.Element("html")
        self.head = ET.SubElement(self.root, "head") if with_head else None
        self.body = None
        self.is_ready = False
        # Count of tree writes, lets callers tell whether anything changed
        self.writes = 0
        self._ready_callbacks = []
        self._observers = []
        if ready:
            self.mark_ready()

    # Lookup

    def get_element_by_id(self, element_id):
        for el in self.root.iter():
            if el.get("id") == element_id:
                return el
        return None

    def _parent_of(self, node):
        for el in self.root.iter():
            for child in el:
                if child is node:
                    return el
        return None

    def _in_body(self, node):
        if self.body is None:
            return False
        return any(el is node for el in self.body.iter())

    # Mutation

    def create_element(self, tag, attrib=None, text=None):
        el = ET.Element(tag, dict(attrib or {}))
        if text is not None:
            el.text = text
        return el

    def append_child(self, parent, node):
        parent.append(node)
        self.writes += 1
        if self._in_body(parent):
            self._notify([node])
        return node

    def remove_element(self, node):
        parent = self._parent_of(node)
        if parent is None:
            return False
        parent.remove(node)
        self.writes += 1
        return True

    def replace_children(self, parent, *nodes):
        for child in list(parent):
            parent.remove(child)
        parent.extend(nodes)
        self.writes += 1

    def set_text(self, node, text):
        node.text = text
        self.writes += 1

    # Readiness

    def when_ready(self, callback):
        """Runs callback once the document is ready (immediately if it already is)."""
        if self.is_ready:
            callback()
            return
        self._ready_callbacks.append(callback)

    def mark_ready(self):
        if self.is_ready:
            return
        if self.body is None:
            self.body = ET.SubElement(self.root, "body")
        self.is_ready = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    # Observation of nodes added under the body

    def observe(self, callback):
        if callback not in self._observers:
            self._observers.append(callback)

    def disconnect(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, added_nodes):
        for callback in list(self._observers):
            try:
                callback(added_nodes)
            except Exception as e:
                logger.error(f"[Video Enhancer] Mutation observer failed: {e}")

    def serialize(self):
        return ET.tostring(self.root, encoding="unicode")
