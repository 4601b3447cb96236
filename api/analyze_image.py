"""Serverless function: POST /analyze-image"""
from src.web.endpoints import ANALYZE_IMAGE
from src.web.serverless import build_function

app = build_function(ANALYZE_IMAGE)
