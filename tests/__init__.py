"""
Tests for the escalator demo: normals, animation, settings, scene and UI.
"""
