"""
Logic-Gate Escape Room Server Application Package

Hosts create rooms around a secret string, students join and each get one
character (or bit) of it, and logic-gate questions generated from that
fragment unlock it bit by bit.
"""

import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from .config import Config


def connect_database(config_class=Config):
    """Open the MongoDB database named in the configuration."""
    client = MongoClient(config_class.MONGO_URI, server_api=ServerApi('1'))
    client.admin.command('ping')
    return client[config_class.MONGO_DB_NAME]


def create_app(config_class=Config, database=None, rng=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        database: pymongo Database to store rooms in; opened from the
            configuration when omitted
        rng: Random source for room codes and puzzles; seeded from
            RANDOM_SEED when omitted

    Returns:
        Tuple of the Flask application and its SocketIO instance
    """
    from .services.room_repository import RoomRepository
    from .services.room_service import RoomService

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Storage and game logic
    if database is None:
        database = connect_database(config_class)
    if rng is None:
        rng = random.Random(app.config.get('RANDOM_SEED'))
    app.room_service = RoomService(RoomRepository(database), rng)

    # Register blueprints
    from .controllers.room_controller import room_bp
    from .controllers.health_controller import health_bp

    app.register_blueprint(room_bp, url_prefix='/api')
    app.register_blueprint(health_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
