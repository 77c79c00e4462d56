"""filekeep — personal file storage behind cookie-carried sessions.

Users sign up, sign in to receive a signed session cookie, and then
create, list, rename, edit, and delete the files they own.
"""

__version__ = "0.1.0"
