"""
Pydantic schemas for the tagging domain and the HTTP surface.

- tags: Work, Tag, RecommendationSet and friends (the core data model)
- works: request/response contracts of the work endpoints
- health: health check response
"""
