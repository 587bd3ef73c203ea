"""
Per-view local state for the dashboard pages.
"""
