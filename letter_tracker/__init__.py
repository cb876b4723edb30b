"""
Letter Tracking Service

Read-mostly reporting API for physical letters mailed to customer accounts
- Letters catalog
- Account-letter shipments with filtering and sorting
- Per-shipment tracking timeline
"""

__version__ = "1.0.0"
__author__ = "Letter Operations Team"
