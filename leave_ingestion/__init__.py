"""
leave_ingestion -- Bulk employee roster imports.

Reads CSV and XLSX rosters, resolves header spellings, validates rows
(required fields, leave counts, duplicates) and writes accepted employees
through the leave kernel in batches.

Architecture:
    leave_ingestion/ is a top-level package. It depends on leave_kernel;
    nothing in leave_kernel imports from ingestion.
"""
