from mission_gallery.api.middlewares.cors import make_cors_middleware
from mission_gallery.api.middlewares.ray_id import ray_id_middleware


__all__ = [
    "make_cors_middleware",
    "ray_id_middleware",
]
