"""Adapters package - third-party integrations (Twilio SMS, file storage)."""
