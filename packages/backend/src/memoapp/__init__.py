"""memoapp — a small notes service with account signup and login.

Users sign up with email/password, log in to receive a JWT, and use
that bearer token to create, read, update, and delete their own notes.
"""

__version__ = "0.1.0"
