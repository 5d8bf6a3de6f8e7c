"""authcore - Registration, credential hashing, token storage and error reporting."""
