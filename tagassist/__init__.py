"""
TagAssist: tag recommendations for creative writing.

A work's text, title and author tags go to a generative model, which proposes
tags to add (from a controlled vocabulary) and author tags to remove. The
response is validated before it is accepted, and one recommendation set per
work is kept in an in-memory registry.
"""

__version__ = "0.1.0"
