"""Business logic layer for accounts app.

- Bearer token issuance and verification
- Signup, login and the public user projection
"""
