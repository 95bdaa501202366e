"""
Project metadata for rsr.
"""

__title__ = "rsr"
__description__ = (
    "Global illumination estimation with Random Sprays Retinex "
    "and color-cast removal."
)
__version__ = "0.1.0"
