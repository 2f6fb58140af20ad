"""
Daily Barcode Report

Fetches the machining scanner feed, keeps the records scanned today (Asia/Manila),
renders them into a PDF table and emails it to the configured recipients.
Designed to run once a day from a scheduler.
"""

__version__ = "1.0.0"
