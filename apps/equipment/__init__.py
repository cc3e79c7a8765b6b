"""Equipment app package.

Holds the equipment listing model. Rates and the active flag stored here
are read by the booking engine through its equipment lookup port.
"""
