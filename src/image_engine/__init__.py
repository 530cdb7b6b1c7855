"""Image storage and transformation engine."""

__version__ = "1.0.0"
__author__ = "Bharat kumar"
__description__ = (
    "Pluggable image storage drivers and an ordered transformation pipeline"
)

__all__ = [
    "infrastructure",
    "models",
    "pipeline",
    "repositories",
    "transformations",
    "utils",
]
