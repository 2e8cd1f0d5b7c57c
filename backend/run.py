from arcade import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so the admin dashboard gets live updates in dev
    socketio.run(app, debug=app.config.get('APP_ENV') == 'development')
