"""Freight quote host: models, validators, step catalogue and API client."""
