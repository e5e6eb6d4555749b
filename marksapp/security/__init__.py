"""Authentication and authorization core: tokens, session resolution, gate."""
