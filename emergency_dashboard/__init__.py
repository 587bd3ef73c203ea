"""
emergency_dashboard – data layer for the MDRRMO emergency-management dashboard.

Fetches publicly shared spreadsheet sheets, maps their rows into typed
inventory, calendar and contact records, and derives the filtered/sorted
lists each dashboard page displays.
"""
