"""
Controllers Package

HTTP blueprints for rooms, participants and health checks.
"""

from .health_controller import health_bp
from .room_controller import room_bp

__all__ = ['health_bp', 'room_bp']
