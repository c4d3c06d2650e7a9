"""Parsers turning generic value trees into validated shapes and models.

No imports here: models.shape_schema imports member_validator directly.
"""
