"""
Restaurant search proxy.

Responsibilities:
- Forward nearby, text and place-details searches to Google Places.
- Page through nearby results with the mandated wait between pages.
- Attach the Haversine distance from the origin and sort nearest first.
- Report failures to the caller as ``{"error", "status"}`` bodies.
"""
