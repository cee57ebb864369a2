"""API Resilience Implementations.

Contains the retrying caller that absorbs throttling from remote services
with exponential backoff, and the classifiers deciding what counts as
throttling.
Bounded Context: API Resilience
"""
