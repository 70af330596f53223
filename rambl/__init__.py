"""Rambl — voice and text mood-journaling assistant."""

import logging

__version__ = "0.1.0"

logger = logging.getLogger("rambl")
if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%H:%M:%S"))
    logger.addHandler(_h)
    logger.setLevel(logging.INFO)
