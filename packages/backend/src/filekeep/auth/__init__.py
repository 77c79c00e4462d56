"""Authentication and session handling.

Learn: One authentication path, four small pieces:
1. password   → bcrypt check of email/password at sign-in
2. jwt        → signed, stateless session token (sub + iat)
3. session    → the token travels in an HttpOnly cookie
4. dependencies → the guard that turns the cookie into a CurrentIdentity

Every protected route receives that CurrentIdentity and passes its
user_id to the service layer, which scopes files by owner.
"""
