# renderer/image_io.py
import logging

from PIL import Image

logger = logging.getLogger(__name__)


def save_buffer(data: bytes, width: int, height: int, path: str) -> bool:
    """
    Encodes a flat RGB8 buffer (row-major, top row first) and writes it to
    `path`; the format follows the file extension, PNG for "image.png".

    Returns False and logs the reason if the image could not be written. The
    rendered buffer itself is still valid in that case.
    """
    try:
        image = Image.frombytes("RGB", (width, height), bytes(data))
        image.save(path)
    except (OSError, ValueError) as e:
        logger.error("An error occurred while saving image %s: %s", path, e)
        return False
    return True
