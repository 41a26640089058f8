"""
Vibrant Colors Module

Samples a sparse tile grid over an RGBA pixel buffer and selects a small set
of bright, saturated, mutually distinct representative colors.
"""

__version__ = "1.0.0"
