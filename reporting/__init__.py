"""
Screening reports and history records.

This package prepares finished screenings for the surrounding application:
- Text reports: motor age, status band, category breakdown, red flags
- History records: append-only dicts keyed by a generated record id
- History trends: motor age gained per chronological month

Nothing here writes to disk or a datastore; persistence belongs to the caller.
"""

from .report_generator import (
    DISCLAIMER,
    CategoryBreakdown,
    ScreeningReport,
    HistoryTrend,
    build_screening_report,
    render_text_report,
    to_history_record,
    summarize_history,
)

__all__ = [
    'DISCLAIMER',
    'CategoryBreakdown',
    'ScreeningReport',
    'HistoryTrend',
    'build_screening_report',
    'render_text_report',
    'to_history_record',
    'summarize_history',
]
