"""Serverless function: POST /analyze-image-file"""
from src.web.endpoints import ANALYZE_IMAGE_FILE
from src.web.serverless import build_function

app = build_function(ANALYZE_IMAGE_FILE)
