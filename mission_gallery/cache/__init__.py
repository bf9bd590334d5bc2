from mission_gallery.cache.listing_cache import Listing
from mission_gallery.cache.listing_cache import ListingCache


__all__ = ["Listing", "ListingCache"]
