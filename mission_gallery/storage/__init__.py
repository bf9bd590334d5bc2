from mission_gallery.storage.object_store import ObjectStore


__all__ = ["ObjectStore"]
