"""svccat: AWS Service Catalog client and CLI with throttling-aware retries."""

__version__ = "0.1.0"
