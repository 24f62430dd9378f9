"""
Core value types, numeric primitives, and invariants.

This module contains the rational-number engine and the geographic
coordinate codec built on it. Both are independent of any image container
or tag-extraction layer.
"""
