"""Serverless function: GET /server-status"""
from src.web.endpoints import SERVER_STATUS
from src.web.serverless import build_function

app = build_function(SERVER_STATUS)
