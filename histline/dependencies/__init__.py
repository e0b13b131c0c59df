from histline.dependencies.search import (
    build_dataset_source,
    build_timeline_search_service,
    build_timeline_store,
    get_dataset_search_service,
    get_timeline_search_service,
)

__all__ = [
    "build_dataset_source",
    "build_timeline_search_service",
    "build_timeline_store",
    "get_dataset_search_service",
    "get_timeline_search_service",
]
