"""Domain layer — entity model, error taxonomy, id and hash helpers.

Pure code with no infrastructure dependencies.
"""
