"""
Escape Room Server - Main Entry Point

This is the main entry point for the logic-gate escape room server.
It connects to MongoDB, validates the game rules and starts the
Flask-SocketIO application.
"""

from escape_room import create_app, connect_database
from escape_room.config import Config, validate_settings_integrity
from escape_room.utils.room_logger import room_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        validate_settings_integrity()
        print("✓ Game settings validated")

        database = connect_database(Config)
        print(f"✓ Connected to MongoDB database '{Config.MONGO_DB_NAME}'")

        print("Creating Flask application...")
        app, socketio = create_app(Config, database=database)
        print("✓ Flask application created successfully")

        room_logger.logger.info("Escape Room Server Starting")

        print(f"\nStarting Escape Room Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Puzzle seed: {Config.RANDOM_SEED if Config.RANDOM_SEED is not None else 'random'}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        room_logger.logger.info("Escape Room Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        room_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
