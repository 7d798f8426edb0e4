"""
Tray icon images for Link Fixer, drawn with Pillow.
"""
from functools import lru_cache

from PIL import Image, ImageDraw

ENABLED_COLORS = ('#2e9e5b', '#1d6b3c')
DISABLED_COLORS = ('#8a8a8a', '#5c5c5c')


@lru_cache(maxsize=4)
def make_icon(enabled: bool, size: int = 64) -> Image.Image:
    fill, outline = ENABLED_COLORS if enabled else DISABLED_COLORS
    img = Image.new('RGBA', (size, size), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)

    # Round badge
    margin = size // 16
    d.ellipse([margin, margin, size - margin, size - margin], fill=fill, outline=outline,
              width=max(1, size // 24))

    # Two interlocking chain links
    link_w = size // 3
    link_h = size // 5
    width = max(2, size // 14)
    cx, cy = size // 2, size // 2
    left = [cx - link_w + size // 16, cy - link_h // 2 - size // 16,
            cx + size // 16, cy + link_h // 2 - size // 16]
    right = [cx - size // 16, cy - link_h // 2 + size // 16,
             cx + link_w - size // 16, cy + link_h // 2 + size // 16]
    d.rounded_rectangle(left, radius=link_h // 2, outline='white', width=width)
    d.rounded_rectangle(right, radius=link_h // 2, outline='white', width=width)

    if not enabled:
        # Strike-through when monitoring is off
        d.line([size // 4, size - size // 4, size - size // 4, size // 4], fill='white', width=width)

    return img
