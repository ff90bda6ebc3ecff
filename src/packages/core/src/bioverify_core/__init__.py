"""Bulk identity verification pipeline."""
