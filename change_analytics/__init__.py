"""
Core package for the change analytics dashboard.

Submodules provide record ingestion, filtering, aggregation, sorting and CSV
export over change-event snapshots, plus the user interface rendering helpers
that are orchestrated by the top-level `app.py`.
"""
