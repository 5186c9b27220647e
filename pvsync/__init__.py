"""
PVSync - uploads locally recorded solar samples to PVOutput
"""

__version__ = "1.0.0"
