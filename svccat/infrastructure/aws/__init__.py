"""AWS adapters built on boto3."""
