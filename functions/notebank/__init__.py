"""
Spreadsheet-grid record store for the notebank service.

This package makes Google Sheets tabs behave like ordered, paginated record
tables (question bank, practical tasks, work log, projects, tags, kanban).
HTTP routing and authentication live outside this package and call the
record mappers with already-validated data.
"""
