#!/usr/bin/env python3
"""
DocBuddy Webhook Server

Flask server that receives GitHub pull request events and posts
Markdown documentation suggestions.
"""

import asyncio
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from docbuddy import __version__
from docbuddy.api import DocBuddyAPI
from docbuddy.config import get_config


logger = logging.getLogger(__name__)

HANDLED_ACTIONS = {'opened', 'synchronize', 'reopened'}


def create_app(api=None) -> Flask:
    """Create the webhook application."""
    app = Flask(__name__)
    CORS(app)

    state = {'api': api}

    def get_api() -> DocBuddyAPI:
        if state['api'] is None:
            state['api'] = DocBuddyAPI()
        return state['api']

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'docbuddy',
            'version': __version__
        })

    @app.route('/api/v1/webhooks/github', methods=['POST'])
    def github_webhook():
        """Handle GitHub pull_request events."""
        event = request.headers.get('X-GitHub-Event', '')
        payload = request.get_json(silent=True) or {}

        if event != 'pull_request' or payload.get('action') not in HANDLED_ACTIONS:
            return jsonify({'status': 'ignored', 'event': event, 'action': payload.get('action')})

        try:
            pull_request = payload['pull_request']
            repository = payload['repository']
            owner = repository['owner']['login']
            repo = repository['name']
            pr_number = pull_request['number']
            commit_id = pull_request['head']['sha']
        except (KeyError, TypeError) as e:
            return jsonify({'status': 'failed', 'error': f'Malformed payload: missing {e}'}), 400

        author_email = (pull_request.get('user') or {}).get('email')

        review = asyncio.run(get_api().review_pull_request(
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            commit_id=commit_id,
            author_email=author_email
        ))

        return jsonify(review.to_dict())

    return app


if __name__ == '__main__':
    # Fail on startup when the environment is misconfigured
    get_config()

    print("🚀 Starting DocBuddy Webhook Server...")
    print("📍 Server will be available at: http://localhost:8000")
    print("📋 Endpoints:")
    print("   - Health Check: GET /api/v1/health")
    print("   - GitHub Webhook: POST /api/v1/webhooks/github")

    create_app().run(
        host='0.0.0.0',
        port=8000,
        debug=False
    )
