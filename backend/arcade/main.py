import os
import platform
import sys
import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from arcade import db
from arcade.errors import success
from arcade.models import Team
from arcade.services.reports import database_counts, recent_activity

main = Blueprint('main', __name__)

STARTED_AT = time.time()


@main.route('/')
def index():
    return success({'name': 'arcade', 'endpoints': ['/api/teams', '/api/quiz', '/api/mine-game', '/api/admin', '/api/health']},
                   'Arcade API is running')


@main.route('/api/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
        team_count = Team.query.count()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.error(f"[health] database probe failed: {exc}")
        return jsonify({
            'success': False,
            'error': 'SERVICE_UNAVAILABLE',
            'message': 'Database connection failed',
            'data': {'status': 'degraded', 'database': 'disconnected'},
        }), 503
    return success({
        'status': 'healthy',
        'database': 'connected',
        'teams': team_count,
        'uptime': round(time.time() - STARTED_AT, 2),
    }, 'Service is healthy')


@main.route('/api/health', methods=['POST'])
def detailed_health():
    return success({
        'status': 'healthy',
        'database': database_counts(),
        'recentActivity': recent_activity(limit=5),
        'process': {
            'pid': os.getpid(),
            'uptime': round(time.time() - STARTED_AT, 2),
            'platform': platform.platform(),
            'python': sys.version.split()[0],
            'environment': current_app.config.get('APP_ENV'),
        },
    }, 'Detailed health check')
