#!/usr/bin/env python3
"""
RestStop Routing Engine - Flask Web API Blueprint
Walking routes split into rest stops at a chosen interval
"""

import time
from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from reststoprouting.config import Config
from reststoprouting.exceptions import InvalidIntervalError, LocationNotFoundError
from reststoprouting.logger import logger
from reststoprouting.route_builder import RouteBuilder

routing_bp = Blueprint('routing_bp', __name__)

CONFIG_KEY = 'RESTSTOP_CONFIG'


def get_engine_config() -> Config:
    """Config stored on the running app by create_app"""
    return current_app.config[CONFIG_KEY]


def parse_route_request(data: Dict[str, Any], config: Config) -> Tuple[str, str, float]:
    """Extract origin, destination and interval from a request body; raises ValueError"""
    origin = str(data.get('origin') or '').strip()
    destination = str(data.get('destination') or '').strip()
    if not origin or not destination:
        raise ValueError('Origin and destination required')

    interval = data.get('interval')
    if interval is None:
        interval = config.default_interval_km
    if isinstance(interval, bool):
        raise ValueError('Interval must be a number')
    return origin, destination, interval


@routing_bp.route('/routing/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'message': 'RestStop Routing Engine is running',
        'path_backends': get_engine_config().path_backends,
        'timestamp': time.time()
    })


@routing_bp.route('/routing', methods=['GET'])
def index():
    """Root endpoint"""
    return jsonify({
        'name': 'RestStop Routing Engine',
        'version': '1.0.0',
        'description': 'Walking routes split into rest stops at a chosen interval',
        'endpoints': {
            'health': '/routing/health',
            'route': '/routing/route'
        }
    })


@routing_bp.route('/routing/route', methods=['POST'])
def route():
    """Build a walking route with rest stops between two places"""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'No data provided'}), 400

    config = get_engine_config()
    try:
        origin, destination, interval = parse_route_request(data, config)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        # fresh builder per request: nothing is shared between requests
        routes = RouteBuilder(config).build_route(origin, destination, interval)
        return jsonify({'routes': [option.to_dict() for option in routes]})
    except InvalidIntervalError as e:
        return jsonify({'error': str(e)}), 400
    except LocationNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except Exception as e:
        logger.error(f"/route error: {e}")
        return jsonify({'error': 'Internal server error'}), 500
