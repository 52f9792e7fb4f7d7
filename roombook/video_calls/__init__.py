"""
Video Calls

Adapters that create an external calendar event with a video link:
- Base adapter interface (base.py)
- Factory for getting the configured adapter (factory.py)
- Google Meet via Google Calendar (google_meet.py)
- Microsoft Teams via Microsoft Graph (microsoft_teams.py)
"""
