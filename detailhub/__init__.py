"""DetailHub API - booking and CRM backend for mobile car-detailing businesses"""

__version__ = "1.0.0"
