"""
Parent registration module - Public school directory, availability, waitlist
submission, payment session and document intake.
"""
