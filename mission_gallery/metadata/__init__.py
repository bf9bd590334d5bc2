from mission_gallery.metadata.index import MetadataIndex


__all__ = ["MetadataIndex"]
