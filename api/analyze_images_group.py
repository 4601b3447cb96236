"""Serverless function: POST /analyze-images-group"""
from src.web.endpoints import ANALYZE_IMAGES_GROUP
from src.web.serverless import build_function

app = build_function(ANALYZE_IMAGES_GROUP)
