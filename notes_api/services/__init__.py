"""Business logic on top of the ORM session."""
