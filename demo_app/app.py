#!/usr/bin/env python3
"""
Demo Web Application - Device Registry

A small JSON API that demonstrates DeviceDB's insert, lookup and in-order
listing, plus the shape of the underlying B-tree.

Endpoints:
- GET  /devices          all devices in id order
- POST /devices          add a device ({"numerical_id", "address", "path"})
- GET  /devices/<id>     look up one device
- GET  /api/stats        index statistics
- GET  /api/tree         nested node structure

Run:
    pip install flask
    python app.py

Then visit: http://localhost:5000/devices
"""

import os
import sys
from typing import Optional

from flask import Flask, jsonify, request

# Add parent directory to path to import devicedb
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from devicedb import Database, DuplicateKeyError, IoTDevice

DEFAULT_DEVICES = [
    IoTDevice(1, '10.0.0.1', '/kitchen/fridge'),
    IoTDevice(2, '10.0.0.2', '/kitchen/oven'),
    IoTDevice(3, '10.0.0.3', '/living-room/lamp'),
    IoTDevice(4, '10.0.0.4', '/living-room/speaker'),
    IoTDevice(5, '10.0.0.5', '/garage/door'),
]


def create_app(db: Optional[Database] = None, seed: bool = False) -> Flask:
    """Build the demo app around a database (a new unique one by default)."""
    app = Flask(__name__)

    if db is None:
        db = Database(unique=True)
    if seed:
        db.add_many(DEFAULT_DEVICES)
    app.config['DEVICE_DB'] = db

    @app.route('/devices')
    def list_devices():
        """List all devices in id order."""
        return jsonify([device.to_dict() for device in db.devices()])

    @app.route('/devices', methods=['POST'])
    def add_device():
        """Add a new device."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Expected a JSON object'}), 400

        try:
            device = IoTDevice.from_dict(data)
            db.add(device)
        except DuplicateKeyError as e:
            return jsonify({'error': str(e)}), 409
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        return jsonify(device.to_dict()), 201

    @app.route('/devices/<int:device_id>')
    def get_device(device_id):
        """Look up a single device."""
        device = db.find(device_id)
        if device is None:
            return jsonify({'error': f'Device {device_id} not found'}), 404
        return jsonify(device.to_dict())

    @app.route('/api/stats')
    def api_stats():
        """API endpoint for index statistics."""
        return jsonify(db.stats())

    @app.route('/api/tree')
    def api_tree():
        """API endpoint for the tree structure."""
        return jsonify(db.index.to_dict())

    return app


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("DeviceDB Demo - Device Registry")
    print("=" * 60)
    print("Starting server at http://localhost:5000")
    print("\nPress Ctrl+C to stop the server.\n")

    create_app(seed=True).run(debug=True, host='0.0.0.0', port=5000)
