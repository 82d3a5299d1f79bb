"""Application package for the school records web app.

This package exposes the model, repository, service and controller
modules used by the FastAPI application. Individual modules contain the
concrete implementations and documentation.
"""
