"""
High-level use cases for the federation app.

Each service module orchestrates repositories to implement business rules
(register a user, post an announcement, enter a team into an event, seed a
fresh install). UI code should call these services instead of manipulating
the key-value store directly.
"""
