"""
barberslots - bookable appointment slots for barbershop schedules.
"""

__version__ = "0.3.0"
