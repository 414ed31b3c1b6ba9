"""Notes API: JWT-authenticated CRUD service for users and their notes."""
