import logging
import os

STORE_PATH = os.environ.get(
    "VIDEO_ENHANCER_STORE", os.path.join(os.getcwd(), "workspace", "settings.json")
)
LOG_LEVEL = os.environ.get("VIDEO_ENHANCER_LOG_LEVEL", "INFO").upper()
PORT = int(os.environ.get("PORT", 5000))

# Seconds to wait after the last burst of inserted video nodes
DEBOUNCE_DELAY = 0.1

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level=None):
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
