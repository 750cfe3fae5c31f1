"""
Service layer for the TagAssist backend.

Contains the tagging core:
- registry: one RecommendationSet per work, keyed by the work's handle
- vocabulary: loading of the controlled vocabulary
- response_parser: extraction and validation of model output
- recommendation_pipeline: the submit flow
- rendering: grouping and text reports
- tagging_service: the facade routes and scripts call
"""
