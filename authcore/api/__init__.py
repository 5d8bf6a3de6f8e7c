"""HTTP API for the account service."""
