"""
QuakeAlert - alert detection and dispatch for a seismic monitoring dashboard.

Polls a seismic event feed, raises severe alerts with sound, keeps a log of
alert-worthy events that can be broadcast to a push topic, and manages an SMS
alert subscription.
"""

__version__ = "1.0.0"
