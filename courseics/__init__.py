"""
courseics – turn a registered-courses CSV export into weekly calendar events.
"""
