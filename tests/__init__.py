"""
Test suite for exif-geo-rational

Contains:
- tests/unit/          : Unit tests for individual modules
"""
