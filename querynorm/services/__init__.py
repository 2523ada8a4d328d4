"""Integrations with Elasticsearch mapping documents and search objects."""
