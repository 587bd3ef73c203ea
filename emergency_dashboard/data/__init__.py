"""
Domain records, row mappers, filters and CSV export.
"""
