"""
Journal services

- entry_store: DailyEntry upserts and lookups
- habit_store / habit_stats: habit catalogue, logs and completion rates
- historical_stats: rolling averages and trends
- streaks: consecutive tracked days
- calendar_blocks: meeting totals and free blocks
- patterns: detected observations
- weekly_summary: the last seven days against the two-week baseline
- reminders: which check-in is due
- journal / status_report: facade and CLI status snapshot
"""
