"""
Core domain models and containers.

Value types (Period, Occurrence, UTCOffset), the time-zone object model
and the composite list primitive. Independent of text formats and storage.
"""
