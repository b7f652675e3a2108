"""Pydantic Schemas — request/response models for the HTTP API.

Invariants:
    - All user input validated by Pydantic before reaching route handlers

Design Decisions:
    - One file per resource
"""
