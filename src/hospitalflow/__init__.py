"""
HospitalFlow: hospital workflow backend

A clean architecture-based service that tracks where each patient is in the
care pathway, prices consultations and prescriptions, and keeps bills and
HMO claims in step as they move through the hospital.
"""

__version__ = "0.1.0"
__author__ = "HospitalFlow Team"
__description__ = "Hospital care-pathway, billing and HMO claim workflow service"
