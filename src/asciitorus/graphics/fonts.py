"""Font lookup for the text mask."""

from functools import lru_cache
import logging

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Heaviest faces first
BOLD_FONT_PATHS = [
    "/usr/share/fonts/truetype/msttcorefonts/Arial_Black.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Black.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "C:/Windows/Fonts/ariblk.ttf",
    "arialbd.ttf",
]


@lru_cache(maxsize=32)
def load_bold_font(size: int):
    """Load the heaviest available TrueType face at ``size`` pixels.

    Falls back to Pillow's bundled font when no system face is found.
    """
    for path in BOLD_FONT_PATHS:
        try:
            font = ImageFont.truetype(path, size)
            logger.debug(f"Mask font: {path} @ {size}px")
            return font
        except OSError:
            continue

    logger.warning(f"No bold system font found, using Pillow default @ {size}px")
    return ImageFont.load_default(size=size)
