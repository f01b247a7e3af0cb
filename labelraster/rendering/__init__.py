from .decode import decode_image, load_image
from .renderer import normalize_image, rasterize, resample, to_gray

__all__ = ["decode_image", "load_image", "normalize_image", "rasterize", "resample", "to_gray"]
