"""
Data source adapters.

HTTP client for the spreadsheet host and the provider that turns fetched
sheets into typed dashboard records.
"""
