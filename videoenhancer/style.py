from videoenhancer.graph_cache import SVG_CONTAINER_ID

STYLE_ID = "firefox-hdr-optimizer-style"

VIDEO_SELECTORS = [
    "video",
    ".html5-main-video",
    ".video-stream",
    ".html5-video-player video",
    '[class*="player"] video',
    "[data-player] video",
]

# Images, thumbnails and icons keep their original look
IMAGE_SELECTORS = [
    "img",
    "picture",
    f"svg:not(#{SVG_CONTAINER_ID} svg)",
    '[role="img"]',
    "ytd-thumbnail",
    ".ytp-videowall-still-image",
    "yt-image",
    "yt-img-shadow",
    ".thumbnail",
    '[class*="thumbnail"]',
    '[class*="poster"]',
]


def build_stylesheet(filter_value):
    video = ",\n".join(VIDEO_SELECTORS)
    images = ",\n".join(IMAGE_SELECTORS)
    return (
        f"{video} {{\n    filter: {filter_value} !important;\n}}\n\n"
        f"{images} {{\n    filter: none !important;\n}}\n"
    )


class StyleInjector:
    def __init__(self, document):
        self.document = document

    def apply_filter_value(self, filter_value):
        style = self.document.get_element_by_id(STYLE_ID)
        if style is None:
            style = self.document.create_element("style", {"id": STYLE_ID})
            parent = self.document.head if self.document.head is not None else self.document.root
            self.document.append_child(parent, style)

        self.document.set_text(style, build_stylesheet(filter_value))
        return style

    def remove(self):
        style = self.document.get_element_by_id(STYLE_ID)
        if style is not None:
            self.document.remove_element(style)
