"""Serverless function: POST /transcribe-audio"""
from src.web.endpoints import TRANSCRIBE_AUDIO
from src.web.serverless import build_function

app = build_function(TRANSCRIBE_AUDIO)
