"""
Services module for the MDF powder coating configurator.

Contains business logic for:
- Pricing (powder coating price calculation)
- Quote assembly and Ardis export
- Business Central integration
"""
