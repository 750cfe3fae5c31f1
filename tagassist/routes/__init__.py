"""
FastAPI routers for all API endpoints.

Each module defines the router(s) for one area:
- health: public health check
- works: work submission, lookup, reports and deletion
"""
