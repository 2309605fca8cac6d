"""Galton board simulation drawn into an SSD1306-style monochrome frame buffer."""

__version__ = "0.1.0"
__all__ = ["__version__"]