"""Household meal planner backend."""
