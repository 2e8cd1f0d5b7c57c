import hmac

from flask import current_app
from flask_socketio import emit, join_room, leave_room

from arcade import socketio

ADMIN_ROOM = 'admin'
NAMESPACE = '/ws'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_admin(data):
    provided = str((data or {}).get('adminCode') or '')
    expected = current_app.config.get('ADMIN_ACCESS_CODE') or ''
    if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
        emit('error', {'message': 'Admin access required'})
        return
    join_room(ADMIN_ROOM)
    emit('joined', {'room': ADMIN_ROOM})


def handle_leave_admin(data=None):
    leave_room(ADMIN_ROOM)
    emit('left', {'room': ADMIN_ROOM})


def handle_ping(data=None):
    emit('pong', data or {})


def notify_admins(team, event_name='team_update', **extra):
    """Push a team's latest totals to every connected admin dashboard."""
    payload = {'team': team.to_dict()}
    payload.update(extra)
    socketio.emit(event_name, payload, to=ADMIN_ROOM, namespace=NAMESPACE)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_admin', handle_join_admin, namespace=namespace)
        socketio.on_event('leave_admin', handle_leave_admin, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
