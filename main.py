"""
Meeting Recorder Relay
Flask application that relays bot creation, status and recordings calls
to Recall.ai, retrying transient failures.
"""

import logging
import os
import sys

from dotenv import load_dotenv
from flask import Flask, jsonify, request

# Load environment variables
load_dotenv()

from meeting_recorder import __version__
from meeting_recorder.config import get_relay_config
from meeting_recorder.errors import ConfigurationError
from meeting_recorder.services import BotRelayService

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = Flask(__name__)

# Configuration
config = get_relay_config()
for problem in config.validate():
    print(f"⚠️  WARNING: {problem}")

# Initialize rate limiting (bot creation costs money per bot)
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Set RATE_LIMIT_STORAGE_URI to redis://[host]:[port] to share limits across instances
limiter = Limiter(
    app=app,
    key_func=get_remote_address,
    default_limits=[],
    storage_uri=config.rate_limit_storage_uri,
    strategy="fixed-window"
)

# Initialize services
relay_service = BotRelayService(config=config)


# =============================================================================
# INFO ROUTES
# =============================================================================

@app.route('/api', methods=['GET'])
def api_info():
    """API info endpoint (JSON)."""
    return jsonify({
        "service": "Meeting Recorder Relay",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "GET /health",
            "create_bot": "POST /api/create-bot",
            "get_bot": "GET /api/bot/{id}",
            "get_recordings": "GET /api/bot/{id}/recordings"
        },
        "usage": {
            "example": "POST /api/create-bot with JSON body: {\"meeting_url\": \"https://zoom.us/j/123456789\"}"
        }
    })


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    from datetime import datetime, timezone

    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "provider": relay_service.config.base_url,
        "configured": relay_service.config.is_configured
    })


# =============================================================================
# BOT ROUTES
# =============================================================================

@app.route('/api/create-bot', methods=['POST'])
@limiter.limit("20 per hour")
def create_bot():
    """
    Create a bot to join and record a meeting.

    Request body:
    {
        "meeting_url": "https://zoom.us/j/123456789"
    }
    """
    data = request.get_json(silent=True) or {}
    meeting_url = data.get('meeting_url')

    if not meeting_url:
        return jsonify({"error": "meeting_url is required"}), 400

    body, status = relay_service.relay("create_bot", meeting_url)
    return jsonify(body), status


@app.route('/api/bot/<bot_id>', methods=['GET'])
def get_bot(bot_id):
    """Get bot status, waiting while it is still joining."""
    body, status = relay_service.relay("get_bot", bot_id)
    return jsonify(body), status


@app.route('/api/bot/<bot_id>/recordings', methods=['GET'])
def get_recordings(bot_id):
    """Get a bot's recordings, waiting for the first ones to appear."""
    body, status = relay_service.relay("get_recordings", bot_id)
    return jsonify(body), status


@app.errorhandler(429)
def rate_limited(e):
    return jsonify({"error": f"Rate limit exceeded: {e.description}"}), 429


if __name__ == '__main__':
    try:
        config.require_valid()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"🚀 Starting Meeting Recorder Relay on port {config.port}")
    print(f"📡 Provider: {config.base_url}")
    print(f"⏱️  Timeout: {config.timeout_ms}ms, retries: {config.max_retries}, "
          f"retry delay: {config.retry_delay_ms}ms")

    app.run(host='0.0.0.0', port=config.port, debug=config.debug)
