"""Inbound adapters for AWS Lambda."""
