# Image Fixer: white balance, noise, colour and blur adjustments for RGBA images
__version__ = "0.1.0"
