"""Utility helpers for splinefilter."""
