"""
                Campus Canteen Kitchen Scheduler

Kitchen-capacity admission scheduling for a campus food-ordering
backend: pickup-slot feasibility, alternative slot suggestions,
browsable slot lists and advisory queue-delay estimates.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
