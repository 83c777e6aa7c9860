"""
Business layer
Form validation, request DTOs and the per-request identity context.
"""
