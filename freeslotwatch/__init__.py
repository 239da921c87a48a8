"""
freeslotwatch - watch a Respa resource calendar for newly opened free slots.
"""

__version__ = "0.1.0"
