"""
Meeting recorder relay.

Sends a recording bot into a meeting through Recall.ai and relays its
status and recordings back to a polling client.
"""

__version__ = "1.0.0"
