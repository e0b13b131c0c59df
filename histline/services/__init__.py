"""
Histline Services Package - timeline acquisition and caching.

Core Services:
- timeline_search: cache-or-generate orchestration for one search request
- wiki_extractor: Wikipedia plain-text extracts
- event_generator & llm_service: LLM-backed event extraction
- image_provider: Unsplash image search
- event_normalizer: year-based ordering and range filtering
- timeline_store: cache stores keyed by normalized query
"""
