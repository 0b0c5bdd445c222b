#!/usr/bin/env python3
"""
Fusion API Endpoint
Flask API that merges already-fetched source payloads into one reading

The caller fans out to the upstream services, then posts everything it got
back (failed sources as null) in one request:

    POST /api/fusion/merge
    {
        "sources": {"NASA POWER": {...}, "OpenAQ": {...}, "Meteostat": null},
        "city": "New York", "lat": 40.71, "lng": -74.01
    }

Readings that were already adapted can be posted as "readings": [{...}]
instead of "sources".
"""

import argparse
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from collectors.source_adapters import build_source_readings
from collectors.source_readings import SourceReading
from processors.fusion_report import provenance_frame
from processors.reading_merger import MergedReading, ReadingMerger
from processors.sanitizer import sanitize_number
from utils.fusion_config import FusionConfig

logger = logging.getLogger(__name__)

READING_VALUE_FIELDS = (
    'temperature', 'humidity', 'wind_speed', 'pm25', 'pm10', 'no2',
    'ozone', 'so2', 'co', 'precipitation', 'aqi', 'lat', 'lng',
)


class FusionRequestError(ValueError):
    """Malformed fusion request body"""


def _optional_str(body: Dict[str, Any], key: str) -> Optional[str]:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FusionRequestError(f"'{key}' must be a string")
    return value


def parse_reading(item: Any) -> SourceReading:
    """Typed SourceReading from a posted reading object"""
    if not isinstance(item, dict):
        raise FusionRequestError("Each reading must be an object")

    source_name = item.get('source_name')
    if not isinstance(source_name, str) or not source_name:
        raise FusionRequestError("Each reading needs a 'source_name'")

    data = dict(item)
    for key in READING_VALUE_FIELDS:
        if key in data:
            data[key] = sanitize_number(data[key])
    available = item.get('available', True)
    if not isinstance(available, bool):
        raise FusionRequestError("'available' must be true or false")
    data['available'] = available
    return SourceReading.from_dict(data)


def parse_fusion_request(body: Any) -> Tuple[List[SourceReading], Dict[str, Any]]:
    """
    Split a request body into source readings and location arguments

    Raises:
        FusionRequestError: body is not a valid fusion request
    """
    if not isinstance(body, dict):
        raise FusionRequestError("Request body must be a JSON object")

    if 'sources' in body:
        sources = body['sources']
        if not isinstance(sources, dict):
            raise FusionRequestError("'sources' must map source names to payloads")
        readings = build_source_readings(sources)
    elif 'readings' in body:
        items = body['readings']
        if not isinstance(items, list):
            raise FusionRequestError("'readings' must be a list")
        readings = [parse_reading(item) for item in items]
    else:
        raise FusionRequestError("Request needs 'sources' or 'readings'")

    location = {
        'city': _optional_str(body, 'city'),
        'country': _optional_str(body, 'country'),
        'lat': sanitize_number(body.get('lat')),
        'lng': sanitize_number(body.get('lng')),
    }
    return readings, location


class FusionAPIEndpoint:
    """
    API endpoint for multi-source fusion
    Can be mounted standalone or run as its own server
    """

    def __init__(self, config: Optional[FusionConfig] = None):
        self.config = config or FusionConfig.from_env()
        self.merger = ReadingMerger(threshold=self.config.agreement_threshold)

        self.app = Flask(__name__)
        CORS(self.app)  # Enable CORS for frontend
        self._setup_routes()

    def _timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _error(self, message: str, status: int):
        return jsonify({
            'success': False,
            'error': message,
            'timestamp': self._timestamp()
        }), status

    def merge_body(self, body: Any) -> MergedReading:
        readings, location = parse_fusion_request(body)
        return self.merger.merge(readings, **location)

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/api/fusion/merge', methods=['POST'])
        def merge_sources():
            """Merge posted source payloads into one reading"""
            try:
                merged = self.merge_body(request.get_json(silent=True))
                logger.info(f"🌐 Merge request served for {merged.city}")
                return jsonify({
                    'success': True,
                    'data': merged.to_dict(),
                    'timestamp': self._timestamp()
                })
            except FusionRequestError as e:
                return self._error(str(e), 400)
            except Exception as e:
                logger.error(f"❌ Merge request failed: {e}")
                return self._error('Internal error while merging sources', 500)

        @self.app.route('/api/fusion/provenance', methods=['POST'])
        def merge_provenance():
            """Per-quantity provenance table (JSON records or CSV)"""
            try:
                merged = self.merge_body(request.get_json(silent=True))
                frame = provenance_frame(merged)

                if request.args.get('format') == 'csv':
                    return Response(frame.to_csv(index=False), mimetype='text/csv')

                return jsonify({
                    'success': True,
                    'data': json.loads(frame.to_json(orient='records', force_ascii=False)),
                    'data_source': merged.data_source_label,
                    'timestamp': self._timestamp()
                })
            except FusionRequestError as e:
                return self._error(str(e), 400)
            except Exception as e:
                logger.error(f"❌ Provenance request failed: {e}")
                return self._error('Internal error while merging sources', 500)

        @self.app.route('/api/fusion/health', methods=['GET'])
        def health_check():
            """API health check"""
            return jsonify({
                'success': True,
                'service': 'Fusion API',
                'status': 'operational',
                'agreement_threshold': self.config.agreement_threshold,
                'timestamp': self._timestamp(),
                'version': '1.0.0'
            })

    def run_server(self, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
        """Run the Flask development server"""
        host = host or self.config.api_host
        port = port or self.config.api_port
        logger.info(f"🌐 Starting Fusion API server on http://{host}:{port}")
        logger.info("   • POST /api/fusion/merge")
        logger.info("   • POST /api/fusion/provenance[?format=csv]")
        logger.info("   • GET  /api/fusion/health")
        self.app.run(host=host, port=port, debug=debug)


def create_app(config: Optional[FusionConfig] = None) -> Flask:
    """Flask application factory"""
    return FusionAPIEndpoint(config).app


def main():
    parser = argparse.ArgumentParser(description='Multi-source fusion API server')
    parser.add_argument('--host', help='Bind address (default: FUSION_API_HOST)')
    parser.add_argument('--port', type=int, help='Port (default: FUSION_API_PORT)')
    parser.add_argument('--debug', action='store_true', help='Enable Flask debug mode')
    args = parser.parse_args()

    config = FusionConfig.from_env()
    logging.basicConfig(level=config.log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    FusionAPIEndpoint(config).run_server(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
