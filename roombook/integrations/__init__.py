"""
External providers

- Google OAuth refresh-token credentials (google_auth.py)
- Gmail API mail delivery (mailer.py)
- Calendar invite attachments (ics.py)
"""
