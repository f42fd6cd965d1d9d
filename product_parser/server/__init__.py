"""
HTTP API for product extraction.

Usage:
    from product_parser.server import create_app

    app = create_app()  # POST /parse-product {"url": ..., "openaiApiKey": ...}
"""

from product_parser.server.service import create_app, run_server
from product_parser.server.views import ErrorResponse, ParseProductRequest, ParseProductResponse

__all__ = ['create_app', 'run_server', 'ParseProductRequest', 'ParseProductResponse', 'ErrorResponse']
