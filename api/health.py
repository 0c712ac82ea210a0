"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from src.utils.settings import BoardConfig

SERVICE_NAME = "phase-board-backend"


def health_payload() -> dict:
    """Liveness plus whether the Supabase connection is configured."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "store_configured": bool(BoardConfig.supabase_url() and BoardConfig.supabase_key()),
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(health_payload()).encode('utf-8'))

    def do_HEAD(self):
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
