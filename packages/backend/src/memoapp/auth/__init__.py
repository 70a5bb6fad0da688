"""Authentication and authorization.

Learn: One authentication path — email/password → JWT bearer token.
The pieces, leaf-first:
1. policy.py — cheap syntactic checks on email/password
2. password.py — Argon2id hashing and verification
3. token.py — signs and verifies time-bounded identity claims
4. dependencies.py — turns an Authorization header into a claim

Signup/login orchestration lives in memoapp.services.auth_service.
"""
