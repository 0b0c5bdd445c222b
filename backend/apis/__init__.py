"""
APIs Package
============
Flask API endpoints for the multi-source fusion service

Import apis.fusion_api directly to build the Flask app.
"""

__version__ = '1.0.0'
