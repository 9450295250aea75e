"""
Google Analytics report fetching, normalization and aggregation.
"""
