"""Password hashing, session tokens and role checks."""
