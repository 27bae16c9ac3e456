"""
Pure domain services: pathway encoding, pricing, claim routing and the
appointment lifecycle.
"""
