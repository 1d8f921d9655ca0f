"""
Contractor Marketplace Scheduling Service.

Appointment scheduling and contractor matching for a home-repair marketplace.
"""

__version__ = "0.1.0"
__description__ = "Contractor Marketplace Scheduling Service"
