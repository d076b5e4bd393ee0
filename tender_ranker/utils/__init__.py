"""Tender Ranker — Utilities Package."""
