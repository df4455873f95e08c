"""Publishers that turn saved domain rows into realtime events.

Server setup and connection handling live in ``realtime.socketio``.
"""
