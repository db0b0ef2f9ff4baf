"""
Pricolor Colors Module

Quantizing histogram builder, tiered peak selector and output formatting
for primary color picking.
"""

__version__ = "1.0.0"
