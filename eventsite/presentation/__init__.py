"""
Presentation layer
Routes, error responders, templates and static assets.
"""
