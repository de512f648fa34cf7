"""
GCP Cloud Functions entrypoint. Exposes gateway_http for 2nd gen HTTP functions.
Set entry-point to main.gateway_http when deploying.
"""
from handlers.gcp_function import gateway_http

__all__ = ["gateway_http"]
