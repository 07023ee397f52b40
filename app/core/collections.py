class CollectionNames:
    """MongoDB collection names used by the repositories."""

    PREVIEW_CACHE = "preview_cache"
