"""Core domain logic for the personal fasting tracker.

This package contains the session state machine, zone calculator and
gamification engine, isolated from platform collaborators for easy testing.
"""
