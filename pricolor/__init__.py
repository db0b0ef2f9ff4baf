"""
pricolor - Primary Color Picker

Picks a single representative chromatic color from a photographic image
using a quantized color histogram and tiered peak selection.
"""

__version__ = "1.0.0"
