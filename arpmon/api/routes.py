"""
Flask routes for querying the host table.

This module provides the read-only endpoints of the monitor. Every endpoint
takes one snapshot of the host table and renders it; none of them can fail
because of the table's contents.
"""

from flask import Blueprint, Response, current_app, jsonify

from ..utils.formatters import render_csv, render_json, render_macs


def _engine():
    return current_app.extensions['arpmon.engine']


def create_blueprint(url_base: str = "") -> Blueprint:
    """
    Create the query blueprint mounted under url_base.

    Args:
        url_base: URL prefix such as "/arp", or "" for the root

    Returns:
        Blueprint with the /macs, /csv, /json and /health routes
    """
    hosts_bp = Blueprint('hosts', __name__, url_prefix=url_base or None)

    @hosts_bp.route('/macs', methods=['GET'])
    def macs():
        """Unique MAC addresses, one per line."""
        return Response(render_macs(_engine().records()), mimetype='text/plain')

    @hosts_bp.route('/csv', methods=['GET'])
    def csv():
        """"ip,mac" lines for every resolved host."""
        engine = _engine()
        return Response(render_csv(engine.records(), engine.prefix), mimetype='text/plain')

    @hosts_bp.route('/json', methods=['GET'])
    def json_listing():
        engine = _engine()
        return Response(render_json(engine.records(), engine.prefix), mimetype='application/json')

    @hosts_bp.route('/health', methods=['GET'])
    def health():
        status = _engine().status()
        return jsonify({
            'status': 'healthy' if status['running'] else 'stopped',
            'workers': len(status['workers']),
            'resolved': status['resolved'],
            'probe_statistics': status['probe_statistics'],
        })

    return hosts_bp
